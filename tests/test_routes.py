"""HTTP tests for the JSON API and the HTML pages (seeded in-memory store)."""

from fastapi.testclient import TestClient

from automation_library.main import create_app
from automation_library.services.memory_store import InMemoryAutomationStore


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_request_id_header(client):
    response = client.get("/health", headers={"X-Request-ID": "abc-123"})

    assert response.headers["X-Request-ID"] == "abc-123"


class TestApi:
    """JSON API under /api."""

    def test_list_uses_camel_case_and_newest_first(self, client):
        response = client.get("/api/automations")

        assert response.status_code == 200
        body = response.json()
        assert [a["id"] for a in body] == ["2", "1"]
        assert body[1]["studentName"] == "Alice Johnson"
        assert body[1]["installationCode"] == "npm install -g email-organizer"
        assert "submissionDate" in body[1]

    def test_list_by_tag(self, client):
        response = client.get("/api/automations", params={"tag": "sms"})

        assert [a["title"] for a in response.json()] == ["Assignment Deadline Reminder"]

    def test_get_unknown_is_404(self, client):
        response = client.get("/api/automations/missing")

        assert response.status_code == 404
        assert response.json() == {"detail": "Automation not found"}

    def test_create(self, client):
        response = client.post("/api/automations", json={
            "title": "X",
            "description": "Y",
            "studentName": "Z",
            "tags": ["a", "b"],
            "links": [],
            "images": [],
            "setupInstructions": "## Hi",
        })

        assert response.status_code == 201
        created = response.json()
        assert created["reactions"] == []
        assert created["installationCode"] is None

        fetched = client.get(f"/api/automations/{created['id']}").json()
        assert fetched == created

    def test_create_blank_title_is_422(self, client):
        response = client.post("/api/automations", json={
            "title": " ",
            "description": "Y",
            "studentName": "Z",
        })

        assert response.status_code == 422
        assert "title" in response.json()["errors"]
        assert len(client.get("/api/automations").json()) == 2

    def test_create_with_script_link_is_422(self, client):
        response = client.post("/api/automations", json={
            "title": "X",
            "description": "Y",
            "studentName": "Z",
            "links": [{"title": "click", "url": "javascript:alert(document.cookie)"}],
        })

        assert response.status_code == 422
        assert "links" in response.json()["errors"]
        assert len(client.get("/api/automations").json()) == 2

    def test_update_with_script_image_is_422(self, client):
        response = client.put("/api/automations/1", json={
            "title": "X",
            "description": "Y",
            "studentName": "Z",
            "images": ["javascript:alert(1)"],
        })

        assert response.status_code == 422
        assert "images" in response.json()["errors"]
        assert client.get("/api/automations/1").json()["title"] == "Auto Email Organizer"

    def test_update_keeps_reactions(self, client):
        response = client.put("/api/automations/1", json={
            "title": "Email Organizer v2",
            "description": "Now with rules",
            "studentName": "Alice Johnson",
            "tags": ["email"],
        })

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Email Organizer v2"
        assert body["links"] == []
        assert body["reactions"] == [{"emoji": "👍", "count": 5}, {"emoji": "❤️", "count": 3}]
        assert body["submissionDate"].startswith("2024-01-15")

    def test_update_unknown_is_404(self, client):
        response = client.put("/api/automations/missing", json={
            "title": "X", "description": "Y", "studentName": "Z",
        })

        assert response.status_code == 404

    def test_add_reaction(self, client):
        response = client.post("/api/automations/2/reactions", json={"emoji": "🚀"})

        assert response.status_code == 200
        assert {"emoji": "🚀", "count": 1} in response.json()["reactions"]

    def test_add_reaction_unknown_is_404(self, client):
        response = client.post("/api/automations/missing/reactions", json={"emoji": "🚀"})

        assert response.status_code == 404

    def test_tags(self, client):
        response = client.get("/api/tags")

        assert response.json() == ["automation", "canvas", "email", "productivity", "reminders", "sms"]


class TestPages:
    """Server-rendered pages."""

    def test_home(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert "Browse Library" in response.text

    def test_browse_lists_everything(self, client):
        response = client.get("/browse")

        assert response.status_code == 200
        assert "Auto Email Organizer" in response.text
        assert "Assignment Deadline Reminder" in response.text
        assert "All (2)" in response.text

    def test_browse_filters_by_tag(self, client):
        response = client.get("/browse", params={"tag": "email"})

        assert "Auto Email Organizer" in response.text
        assert "Assignment Deadline Reminder" not in response.text

    def test_detail_renders_markdown(self, client):
        response = client.get("/automation/1")

        assert response.status_code == 200
        assert "<h2>Setup Instructions</h2>" in response.text
        assert "npm install -g email-organizer" in response.text
        assert "GitHub Repository" in response.text

    def test_detail_unknown_is_404_page(self, client):
        response = client.get("/automation/missing")

        assert response.status_code == 404
        assert "Automation not found" in response.text

    def test_react_redirects_to_detail(self, client):
        response = client.post("/automation/2/reactions", data={"emoji": "👍"}, follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/automation/2"
        reactions = client.get("/api/automations/2").json()["reactions"]
        assert {"emoji": "👍", "count": 9} in reactions

    def test_submit_creates_and_redirects(self, client):
        response = client.post(
            "/submit",
            data={
                "title": "Lecture Notes Sync",
                "description": "Copies slides",
                "student_name": "Dana Lee",
                "tags": "files, productivity",
                "setup_instructions": "## Setup",
                "installation_code": "",
                "link_title": ["Source", ""],
                "link_url": ["https://github.com/example/notes", ""],
                "image": [""],
            },
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/browse"

        newest = client.get("/api/automations").json()[0]
        assert newest["title"] == "Lecture Notes Sync"
        assert newest["tags"] == ["files", "productivity"]
        assert newest["links"] == [{"title": "Source", "url": "https://github.com/example/notes"}]
        assert newest["images"] == []
        assert newest["installationCode"] is None

    def test_submit_missing_fields_rerenders_form(self, client):
        response = client.post(
            "/submit",
            data={"title": "Only a title", "description": "", "student_name": ""},
            follow_redirects=False,
        )

        assert response.status_code == 422
        assert "This field is required." in response.text
        assert 'value="Only a title"' in response.text
        assert len(client.get("/api/automations").json()) == 2

    def test_edit_form_is_prefilled(self, client):
        response = client.get("/automation/2/edit")

        assert response.status_code == 200
        assert 'value="Assignment Deadline Reminder"' in response.text
        assert 'value="canvas, reminders, sms, productivity"' in response.text

    def test_edit_saves_and_redirects(self, client):
        response = client.post(
            "/automation/2/edit",
            data={
                "title": "Deadline Reminder",
                "description": "SMS before deadlines",
                "student_name": "Bob Smith",
                "tags": "canvas",
            },
            follow_redirects=False,
        )

        assert response.status_code == 303
        updated = client.get("/api/automations/2").json()
        assert updated["title"] == "Deadline Reminder"
        assert updated["tags"] == ["canvas"]
        assert updated["reactions"] == [{"emoji": "👍", "count": 8}, {"emoji": "🔥", "count": 4}]

    def test_edit_unknown_is_404(self, client):
        response = client.get("/automation/missing/edit")

        assert response.status_code == 404

    def test_submit_script_link_rerenders_form(self, client):
        response = client.post(
            "/submit",
            data={
                "title": "Sneaky",
                "description": "Not really an automation",
                "student_name": "Mallory",
                "link_title": ["click"],
                "link_url": ["javascript:alert(document.cookie)"],
            },
            follow_redirects=False,
        )

        assert response.status_code == 422
        assert "Link URLs must start with http:// or https://." in response.text
        assert len(client.get("/api/automations").json()) == 2


class TaggedLookupStore(InMemoryAutomationStore):
    """Seeded store that records list_by_tag() calls."""

    def __init__(self):
        super().__init__(seed=True)
        self.requested_tags = []

    async def list_by_tag(self, tag):
        self.requested_tags.append(tag)
        return await super().list_by_tag(tag)


def test_browse_filters_through_list_by_tag():
    store = TaggedLookupStore()

    with TestClient(create_app(store=store)) as client:
        response = client.get("/browse", params={"tag": "sms"})

    assert store.requested_tags == ["sms"]
    assert "Assignment Deadline Reminder" in response.text
    assert "Auto Email Organizer" not in response.text
