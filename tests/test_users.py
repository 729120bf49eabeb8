"""
Account administration through /users
"""
from jobboard.models.application import Application
from jobboard.models.job import Job
from jobboard.models.user import User

from tests.conftest import auth, make_job, make_user, reload

USERS = "/api/v1/users"


def _apply(db, user, job):
    db.add(Application(user_id=user.id, job_id=job.id, resume=user.resume))
    job.application_count = (job.application_count or 0) + 1
    db.commit()


# ============== LISTING ==============

class TestListUsers:

    def test_admin_lists_every_account(self, client, admin, employer, jobseeker):
        response = client.get(USERS, headers=auth(admin))

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 3
        assert {user["email"] for user in body["data"]} == {
            "admin@example.com", "employer@example.com", "seeker@example.com",
        }
        assert all("passwordHash" not in user for user in body["data"])

    def test_role_filter(self, client, admin, employer, other_employer, jobseeker):
        response = client.get(USERS, params={"role": "employer"}, headers=auth(admin))

        assert {user["id"] for user in response.json()["data"]} == {employer.id, other_employer.id}

    def test_active_filter(self, client, db, admin, jobseeker):
        dormant = make_user(db, "jobseeker", "dormant@example.com", is_active=False)

        response = client.get(USERS, params={"isActive": "false"}, headers=auth(admin))

        assert [user["id"] for user in response.json()["data"]] == [dormant.id]

    def test_search_by_name_or_email(self, client, admin, employer, jobseeker):
        by_name = client.get(USERS, params={"search": "erin"}, headers=auth(admin)).json()
        by_email = client.get(USERS, params={"search": "seeker@"}, headers=auth(admin)).json()

        assert [user["id"] for user in by_name["data"]] == [employer.id]
        assert [user["id"] for user in by_email["data"]] == [jobseeker.id]

    def test_pagination(self, client, admin, employer, jobseeker):
        body = client.get(USERS, params={"page": 2, "limit": 2}, headers=auth(admin)).json()

        assert body["count"] == 1
        assert body["total"] == 3
        assert body["pages"] == 2

    def test_non_admin_cannot_list(self, client, employer):
        response = client.get(USERS, headers=auth(employer))

        assert response.status_code == 403
        assert response.json()["message"] == "User role employer is not authorized to access this route"


# ============== GET / UPDATE ==============

class TestManageUser:

    def test_self_and_admin_can_view(self, client, jobseeker, admin):
        assert client.get(f"{USERS}/{jobseeker.id}", headers=auth(jobseeker)).status_code == 200
        assert client.get(f"{USERS}/{jobseeker.id}", headers=auth(admin)).status_code == 200

    def test_others_cannot_view(self, client, jobseeker, employer):
        response = client.get(f"{USERS}/{jobseeker.id}", headers=auth(employer))

        assert response.status_code == 403

    def test_missing_user(self, client, admin):
        response = client.get(f"{USERS}/ghost", headers=auth(admin))

        assert response.status_code == 404
        assert response.json()["message"] == "User not found"

    def test_self_update_of_name_email_and_profile(self, client, db, jobseeker):
        response = client.put(
            f"{USERS}/{jobseeker.id}",
            json={"name": "Sam S.", "email": "Sam@Example.com", "profile": {"location": "Porto"}},
            headers=auth(jobseeker),
        )

        assert response.status_code == 200
        assert response.json()["message"] == "User updated successfully"
        user = reload(db, User, jobseeker.id)
        assert user.name == "Sam S."
        assert user.email == "sam@example.com"
        assert user.profile["location"] == "Porto"
        assert user.resume == "/uploads/resumes/resume.pdf"

    def test_self_cannot_change_role(self, client, db, jobseeker):
        response = client.put(f"{USERS}/{jobseeker.id}", json={"role": "admin"}, headers=auth(jobseeker))

        assert response.status_code == 403
        assert reload(db, User, jobseeker.id).role == "jobseeker"

    def test_admin_changes_role_and_verification(self, client, db, jobseeker, admin):
        response = client.put(
            f"{USERS}/{jobseeker.id}",
            json={"role": "employer", "isVerified": True},
            headers=auth(admin),
        )

        assert response.status_code == 200
        user = reload(db, User, jobseeker.id)
        assert user.role == "employer"
        assert user.is_verified is True

    def test_other_user_cannot_update(self, client, db, jobseeker, other_jobseeker):
        response = client.put(f"{USERS}/{jobseeker.id}", json={"name": "Hacked"}, headers=auth(other_jobseeker))

        assert response.status_code == 403
        assert reload(db, User, jobseeker.id).name == "Sam Seeker"

    def test_email_must_stay_unique(self, client, jobseeker, employer):
        response = client.put(
            f"{USERS}/{jobseeker.id}", json={"email": "employer@example.com"}, headers=auth(jobseeker)
        )

        assert response.status_code == 400
        assert response.json()["message"] == "User already exists with this email"

    def test_invalid_email(self, client, jobseeker):
        response = client.put(f"{USERS}/{jobseeker.id}", json={"email": "not-an-email"}, headers=auth(jobseeker))

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "email"

    def test_empty_update_is_rejected(self, client, jobseeker):
        assert client.put(f"{USERS}/{jobseeker.id}", json={}, headers=auth(jobseeker)).status_code == 400


# ============== TOGGLE STATUS ==============

class TestToggleStatus:

    def test_admin_toggles_back_and_forth(self, client, db, jobseeker, admin):
        off = client.put(f"{USERS}/{jobseeker.id}/toggle-status", headers=auth(admin))
        assert off.status_code == 200
        assert off.json()["data"]["isActive"] is False
        assert off.json()["message"] == "User deactivated successfully"

        # Deactivated accounts lose access straight away
        assert client.get("/api/v1/auth/me", headers=auth(jobseeker)).status_code == 401

        on = client.put(f"{USERS}/{jobseeker.id}/toggle-status", headers=auth(admin))
        assert on.json()["data"]["isActive"] is True
        assert reload(db, User, jobseeker.id).is_active is True

    def test_admin_cannot_toggle_self(self, client, admin):
        response = client.put(f"{USERS}/{admin.id}/toggle-status", headers=auth(admin))

        assert response.status_code == 400

    def test_non_admin_cannot_toggle(self, client, jobseeker, employer):
        response = client.put(f"{USERS}/{jobseeker.id}/toggle-status", headers=auth(employer))

        assert response.status_code == 403


# ============== HARD DELETE ==============

class TestDeleteUser:

    def test_deleting_jobseeker_removes_applications_and_decrements_counts(
        self, client, db, employer, jobseeker, other_jobseeker, admin
    ):
        first = make_job(db, employer)
        second = make_job(db, employer)
        _apply(db, jobseeker, first)
        _apply(db, jobseeker, second)
        _apply(db, other_jobseeker, first)
        seeker_id, first_id, second_id = jobseeker.id, first.id, second.id

        response = client.delete(f"{USERS}/{seeker_id}", headers=auth(admin))

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "User deleted successfully",
            "applicationsRemoved": 2,
            "jobsRemoved": 0,
        }
        assert reload(db, User, seeker_id) is None
        assert reload(db, Job, first_id).application_count == 1
        assert reload(db, Job, second_id).application_count == 0
        assert db.query(Application).filter(Application.user_id == seeker_id).count() == 0

    def test_deleting_employer_removes_posted_jobs(self, client, db, employer, other_employer, jobseeker, admin):
        mine = make_job(db, employer)
        theirs = make_job(db, other_employer)
        _apply(db, jobseeker, mine)
        _apply(db, jobseeker, theirs)
        mine_id, theirs_id = mine.id, theirs.id

        body = client.delete(f"{USERS}/{employer.id}", headers=auth(admin)).json()

        assert body["jobsRemoved"] == 1
        assert body["applicationsRemoved"] == 1
        assert reload(db, Job, mine_id) is None
        assert reload(db, Job, theirs_id).application_count == 1
        assert db.query(Application).count() == 1

    def test_user_deletes_own_account(self, client, db, jobseeker):
        seeker_id, headers = jobseeker.id, auth(jobseeker)

        response = client.delete(f"{USERS}/{seeker_id}", headers=headers)

        assert response.status_code == 200
        assert reload(db, User, seeker_id) is None
        assert client.get("/api/v1/auth/me", headers=headers).status_code == 401

    def test_others_cannot_delete(self, client, db, jobseeker, employer):
        response = client.delete(f"{USERS}/{jobseeker.id}", headers=auth(employer))

        assert response.status_code == 403
        assert reload(db, User, jobseeker.id) is not None
