import uuid
from datetime import date, datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError

from goal_tracker.crud import goal as crud_goal
from goal_tracker.models.debt import Debt
from goal_tracker.models.workspace import Workspace


def goal_payload(**overrides):
    payload = {
        "name": "Bali Trip",
        "type": "vacation",
        "target_amount": 10_000_000,
        "target_date": (date.today() + timedelta(days=360)).isoformat(),
        "priority": "high",
    }
    payload.update(overrides)
    return payload


def tx_payload(account_id, **overrides):
    payload = {
        "type": "saving",
        "amount": 500_000,
        "description": "Monthly vacation saving",
        "date": (datetime.utcnow() - timedelta(hours=1)).isoformat(),
        "account_id": str(account_id),
    }
    payload.update(overrides)
    return payload


class TestHealthAndRoot:
    def test_health_check(self, sync_client):
        response = sync_client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["environment"] == "development"

    def test_root_endpoint(self, sync_client):
        response = sync_client.get("/")
        assert response.status_code == 200
        assert "Goal Tracker API" in response.json()["message"]


class TestGoals:
    async def test_unknown_workspace(self, client):
        response = await client.get(f"/api/v1/workspaces/{uuid.uuid4()}/goals")
        assert response.status_code == 404
        assert response.json() == {"detail": "Workspace not found"}

    async def test_create_and_read_goal(self, client, workspace):
        base = f"/api/v1/workspaces/{workspace.id}/goals"
        response = await client.post(base, json=goal_payload(current_amount=1_000_000, create_milestones=True))
        assert response.status_code == 201
        goal = response.json()
        assert goal["current_amount"] == 1_000_000
        assert goal["status"] == "active"

        response = await client.get(f"{base}/{goal['id']}")
        assert response.status_code == 200
        assert response.json()["name"] == "Bali Trip"

        milestones = (await client.get(f"{base}/{goal['id']}/milestones")).json()
        assert [m["order"] for m in milestones] == [1, 2, 3, 4]

        contributions = (await client.get(f"{base}/{goal['id']}/contributions")).json()
        assert [c["contribution_type"] for c in contributions] == ["manual"]

    async def test_validation_error(self, client, workspace):
        response = await client.post(
            f"/api/v1/workspaces/{workspace.id}/goals", json=goal_payload(target_amount=-5)
        )
        assert response.status_code == 422

    async def test_goal_not_found(self, client, workspace):
        response = await client.get(f"/api/v1/workspaces/{workspace.id}/goals/{uuid.uuid4()}")
        assert response.status_code == 404

    async def test_manual_progress_and_completion(self, client, workspace):
        base = f"/api/v1/workspaces/{workspace.id}/goals"
        goal = (await client.post(base, json=goal_payload(target_amount=1000))).json()

        response = await client.post(f"{base}/{goal['id']}/progress", json={"amount": 1000, "note": "Bonus"})
        assert response.status_code == 200
        assert response.json()["status"] == "completed"
        assert response.json()["completed_at"] is not None

        response = await client.patch(f"{base}/{goal['id']}", json={"status": "active"})
        assert response.status_code == 409

    async def test_patch_to_completed_goes_through_engine(self, client, workspace):
        base = f"/api/v1/workspaces/{workspace.id}/goals"
        goal = (await client.post(base, json=goal_payload())).json()

        response = await client.patch(f"{base}/{goal['id']}", json={"status": "completed", "priority": "low"})
        assert response.status_code == 200
        assert response.json()["status"] == "completed"
        assert response.json()["priority"] == "low"
        assert response.json()["completed_at"] is not None

        notifications = (await client.get(f"/api/v1/workspaces/{workspace.id}/notifications")).json()
        assert [n["title"] for n in notifications] == ["Goal Completed! 🎉"]

    async def test_links_must_belong_to_workspace(self, client, session, workspace, make_debt):
        other = Workspace(id=uuid.uuid4(), name="Other Workspace", type="personal")
        session.add(other)
        await session.commit()
        foreign_debt = Debt(workspace_id=other.id, name="Foreign loan", total_amount=1000, remaining_amount=0)
        session.add(foreign_debt)
        await session.commit()
        own_debt = await make_debt()

        base = f"/api/v1/workspaces/{workspace.id}/goals"
        response = await client.post(base, json=goal_payload(type="debt_payment", linked_debt_id=str(foreign_debt.id)))
        assert response.status_code == 422
        assert response.json() == {"detail": "Linked debt not found"}

        response = await client.post(base, json=goal_payload(linked_account_id=str(uuid.uuid4())))
        assert response.status_code == 422
        assert response.json() == {"detail": "Linked account not found"}

        response = await client.post(base, json=goal_payload(type="debt_payment", linked_debt_id=str(own_debt.id)))
        assert response.status_code == 201
        goal = response.json()

        response = await client.patch(f"{base}/{goal['id']}", json={"linked_debt_id": str(foreign_debt.id)})
        assert response.status_code == 422
        assert (await client.get(f"{base}/{goal['id']}")).json()["linked_debt_id"] == str(own_debt.id)

    async def test_delete_goal(self, client, workspace):
        base = f"/api/v1/workspaces/{workspace.id}/goals"
        goal = (await client.post(base, json=goal_payload())).json()
        assert (await client.delete(f"{base}/{goal['id']}")).status_code == 204
        assert (await client.get(f"{base}/{goal['id']}")).status_code == 404

    async def test_insights_suggestions_and_health(self, client, workspace):
        base = f"/api/v1/workspaces/{workspace.id}/goals"
        goal = (await client.post(base, json=goal_payload(
            target_date=(date.today() + timedelta(days=30)).isoformat(),
            is_auto_tracking=False,
        ))).json()

        response = await client.post(f"{base}/{goal['id']}/insights")
        assert response.status_code == 201
        titles = {i["title"] for i in response.json()}
        assert {"Goal At Risk", "Enable Auto-Tracking"} <= titles
        assert len((await client.get(f"{base}/{goal['id']}/insights")).json()) == len(titles)

        assert (await client.get(f"{base}/suggestions")).json() == []

        health = (await client.get(f"{base}/financial-health")).json()
        assert health["overall_score"] == 0
        assert health["recommendations"] == ["Create an emergency fund goal for financial security"]

        analytics = (await client.get(f"{base}/analytics")).json()
        assert analytics["total_goals"] == 1
        assert analytics["goals_by_type"] == {"vacation": 1}


class TestTransactions:
    async def test_create_transaction_tracks_goal(self, client, workspace, account):
        goals_url = f"/api/v1/workspaces/{workspace.id}/goals"
        goal = (await client.post(goals_url, json=goal_payload())).json()

        tx_url = f"/api/v1/workspaces/{workspace.id}/transactions"
        response = await client.post(tx_url, json=tx_payload(account.id))
        assert response.status_code == 201
        body = response.json()
        assert body["tracked"] == 1
        assert body["goals"] == ["Bali Trip (Keywords: vacation)"]

        assert (await client.get(f"{goals_url}/{goal['id']}")).json()["current_amount"] == 500_000

        # Re-tracking the same transaction changes nothing
        response = await client.post(f"{tx_url}/{body['transaction']['id']}/track")
        assert response.json() == {"tracked": 0, "goals": []}
        assert (await client.get(f"{goals_url}/{goal['id']}")).json()["current_amount"] == 500_000

    async def test_failing_goal_does_not_break_response(self, client, workspace, account, monkeypatch):
        goals_url = f"/api/v1/workspaces/{workspace.id}/goals"
        await client.post(goals_url, json=goal_payload(name="Rainy day", type="savings"))
        await client.post(goals_url, json=goal_payload(name="New car", type="savings"))

        original_entries = crud_goal.get_ledger_entries
        calls = []

        async def failing_once(*args, **kwargs):
            calls.append(1)
            if len(calls) == 1:
                raise SQLAlchemyError("simulated read failure")
            return await original_entries(*args, **kwargs)

        monkeypatch.setattr(crud_goal, "get_ledger_entries", failing_once)

        response = await client.post(
            f"/api/v1/workspaces/{workspace.id}/transactions",
            json=tx_payload(account.id, description="Monthly saving deposit"),
        )
        assert response.status_code == 201
        body = response.json()
        assert body["tracked"] == 1
        assert len(body["goals"]) == 1
        assert body["transaction"]["description"] == "Monthly saving deposit"
        assert body["transaction"]["amount"] == 500_000

    async def test_untracked_transaction(self, client, workspace, account):
        response = await client.post(
            f"/api/v1/workspaces/{workspace.id}/transactions",
            json=tx_payload(account.id, description="Groceries", type="expense"),
        )
        assert response.status_code == 201
        assert response.json()["tracked"] == 0

        listed = (await client.get(f"/api/v1/workspaces/{workspace.id}/transactions")).json()
        assert [t["description"] for t in listed] == ["Groceries"]

    async def test_unknown_transaction(self, client, workspace):
        base = f"/api/v1/workspaces/{workspace.id}/transactions/{uuid.uuid4()}"
        assert (await client.get(base)).status_code == 404
        assert (await client.post(f"{base}/track")).status_code == 404

    async def test_invalid_transaction_type(self, client, workspace, account):
        response = await client.post(
            f"/api/v1/workspaces/{workspace.id}/transactions",
            json=tx_payload(account.id, type="gift"),
        )
        assert response.status_code == 422


class TestNotifications:
    async def test_read_flow(self, client, workspace, account):
        await client.post(f"/api/v1/workspaces/{workspace.id}/goals", json=goal_payload())
        await client.post(f"/api/v1/workspaces/{workspace.id}/transactions", json=tx_payload(account.id))

        base = f"/api/v1/workspaces/{workspace.id}/notifications"
        unread = (await client.get(base, params={"unread_only": True})).json()
        assert [n["title"] for n in unread] == ["Goal Auto-Tracked"]
        assert (await client.get(f"{base}/unread-count")).json() == 1

        response = await client.post(f"{base}/{unread[0]['id']}/read")
        assert response.status_code == 200
        assert response.json()["is_read"] is True
        assert (await client.get(f"{base}/unread-count")).json() == 0
        assert (await client.post(f"{base}/read_all")).json() == 0

    async def test_mark_unknown_notification(self, client, workspace):
        response = await client.post(f"/api/v1/workspaces/{workspace.id}/notifications/{uuid.uuid4()}/read")
        assert response.status_code == 404
