"""
Integration tests for the task CRUD endpoints.
"""
from database.models import Task
from tests.conftest import auth_headers


class TestListTasks:
    def test_requires_identity(self, test_client):
        response = test_client.get("/api/tasks")

        assert response.status_code == 401
        assert response.json() == {"detail": "Not authorized, no user identity"}

    def test_unknown_identity(self, test_client):
        response = test_client.get("/api/tasks", headers={"X-User-Id": "e" * 24})

        assert response.status_code == 401

    def test_member_sees_own_and_unassigned(self, test_client, member_user, sample_project,
                                            sample_task, unassigned_task, other_member_task):
        response = test_client.get(
            "/api/tasks", params={"projectId": sample_project.id}, headers=auth_headers(member_user)
        )

        assert response.status_code == 200
        titles = {task["title"] for task in response.json()["tasks"]}
        assert titles == {"Fix login", "Write docs"}

    def test_manager_sees_all_team_tasks(self, test_client, manager_user, sample_task, unassigned_task,
                                         other_member_task, other_project, test_db_session):
        test_db_session.add(Task(title="Rotate keys", status="todo", project_id=other_project.id))
        test_db_session.commit()

        response = test_client.get("/api/tasks", headers=auth_headers(manager_user))

        assert response.status_code == 200
        tasks = response.json()["tasks"]
        assert len(tasks) == 3
        assert "Rotate keys" not in {task["title"] for task in tasks}

    def test_snapshot_shape(self, test_client, manager_user, member_user, sample_project, sample_task):
        response = test_client.get(
            "/api/tasks", params={"projectId": sample_project.id}, headers=auth_headers(manager_user)
        )

        task = response.json()["tasks"][0]
        assert task["id"] == sample_task.id
        assert task["status"] == "todo"
        assert task["project"] == {"id": sample_project.id, "name": "Website"}
        assert task["assigned_to"]["name"] == "Sarah Connor"

    def test_other_team_project(self, test_client, manager_user, other_project):
        response = test_client.get(
            "/api/tasks", params={"projectId": other_project.id}, headers=auth_headers(manager_user)
        )

        assert response.status_code == 403
        assert response.json()["detail"] == "You do not have access to this project's tasks"

    def test_unknown_project(self, test_client, manager_user):
        response = test_client.get("/api/tasks", params={"projectId": "f" * 24}, headers=auth_headers(manager_user))

        assert response.status_code == 404


class TestCreateTask:
    def test_manager_creates_assigned_task(self, test_client, recording_notifier, manager_user,
                                           member_user, sample_project):
        response = test_client.post("/api/tasks", headers=auth_headers(manager_user), json={
            "title": "  Ship release  ",
            "projectId": sample_project.id,
            "assignedTo": member_user.id,
        })

        assert response.status_code == 201
        task = response.json()["task"]
        assert task["title"] == "Ship release"
        assert task["status"] == "todo"
        assert task["assigned_to"]["id"] == member_user.id
        assert recording_notifier.published[-1][:2] == (f"team:{sample_project.team_id}", "task-updated")

    def test_member_cannot_create(self, test_client, member_user, sample_project):
        response = test_client.post("/api/tasks", headers=auth_headers(member_user), json={
            "title": "Sneaky", "projectId": sample_project.id,
        })

        assert response.status_code == 403

    def test_admin_cannot_assign(self, test_client, admin_user, member_user, sample_project):
        response = test_client.post("/api/tasks", headers=auth_headers(admin_user), json={
            "title": "Ship release", "projectId": sample_project.id, "assignedTo": member_user.id,
        })

        assert response.status_code == 403

    def test_assignee_outside_team(self, test_client, manager_user, outsider, sample_project):
        response = test_client.post("/api/tasks", headers=auth_headers(manager_user), json={
            "title": "Ship release", "projectId": sample_project.id, "assignedTo": outsider.id,
        })

        assert response.status_code == 403
        assert response.json()["detail"] == "Cannot assign task to user outside the team"

    def test_project_of_another_team(self, test_client, manager_user, other_project):
        response = test_client.post("/api/tasks", headers=auth_headers(manager_user), json={
            "title": "Ship release", "projectId": other_project.id,
        })

        assert response.status_code == 403

    def test_blank_title(self, test_client, manager_user, sample_project):
        response = test_client.post("/api/tasks", headers=auth_headers(manager_user), json={
            "title": "   ", "projectId": sample_project.id,
        })

        assert response.status_code == 422


class TestUpdateTask:
    def test_member_changes_only_status(self, test_client, member_user, sample_task, test_db_session):
        response = test_client.put(f"/api/tasks/{sample_task.id}", headers=auth_headers(member_user), json={
            "title": "Hacked", "description": "Gone", "status": "done",
        })

        assert response.status_code == 200
        task = response.json()["task"]
        assert task["status"] == "done"
        assert task["title"] == "Fix login"
        assert task["description"] == "Users cannot sign in"

    def test_member_cannot_update_foreign_task(self, test_client, member_user, other_member_task):
        response = test_client.put(f"/api/tasks/{other_member_task.id}", headers=auth_headers(member_user), json={
            "status": "done",
        })

        assert response.status_code == 403
        assert response.json()["detail"] == "You can only update tasks assigned to you"

    def test_manager_reassigns(self, test_client, recording_notifier, manager_user, second_member, sample_task):
        response = test_client.put(f"/api/tasks/{sample_task.id}", headers=auth_headers(manager_user), json={
            "assignedTo": second_member.id,
        })

        assert response.status_code == 200
        assert response.json()["task"]["assigned_to"]["name"] == "Tom Baker"
        assert recording_notifier.events() == ["task-updated"]

    def test_other_team_cannot_update(self, test_client, outsider, sample_task):
        response = test_client.put(f"/api/tasks/{sample_task.id}", headers=auth_headers(outsider), json={
            "status": "done",
        })

        assert response.status_code == 403

    def test_unknown_task(self, test_client, manager_user):
        response = test_client.put(f"/api/tasks/{'f' * 24}", headers=auth_headers(manager_user), json={
            "status": "done",
        })

        assert response.status_code == 404
        assert response.json()["detail"] == "Task not found"


class TestDeleteTask:
    def test_admin_deletes(self, test_client, recording_notifier, admin_user, sample_task, test_db_session):
        task_id = sample_task.id

        response = test_client.delete(f"/api/tasks/{task_id}", headers=auth_headers(admin_user))

        assert response.status_code == 200
        assert response.json() == {"message": "Task deleted successfully"}
        assert test_db_session.query(Task).filter(Task.id == task_id).first() is None
        assert recording_notifier.published[-1][1:] == ("task-deleted", {"taskId": task_id})

    def test_manager_cannot_delete(self, test_client, manager_user, sample_task, test_db_session):
        response = test_client.delete(f"/api/tasks/{sample_task.id}", headers=auth_headers(manager_user))

        assert response.status_code == 403
        assert response.json()["detail"] == "Only Admins can delete tasks"
        assert test_db_session.query(Task).filter(Task.id == sample_task.id).first() is not None
