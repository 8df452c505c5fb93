from datetime import datetime, timezone

from app.models.schedule_template import ScheduleTemplate


def create_schedule(client, group_id="G1"):
    response = client.post(
        "/api/schedules/", json={"groupId": group_id, "semesterId": "2026-fall", "semester": 1, "year": 2026}
    )
    assert response.status_code == 201, response.text
    return response.json()


def template_lesson(**overrides):
    lesson = {
        "subjectId": "math",
        "teacherId": "T1",
        "room": "101",
        "type": "lecture",
        "dayOfWeek": 1,
        "startTime": "09:00",
        "endTime": "10:30",
        "weekType": "all",
    }
    lesson.update(overrides)
    return lesson


def create_template(client, name="First year", lessons=None, **extra):
    payload = {"name": name, "description": "Core courses", **extra}
    if lessons is not None:
        payload["lessons"] = lessons
    return client.post("/api/templates/", json=payload)


def test_template_crud(client):
    created = create_template(client, lessons=[template_lesson(type="practice")])
    assert created.status_code == 201, created.text
    template = created.json()
    assert template["name"] == "First year"
    assert template["lessons"][0]["type"] == "seminar"
    assert template["lessons"][0]["dayOfWeek"] == 1

    updated = client.put(
        f"/api/templates/{template['id']}",
        json={"description": "Updated", "lessons": [template_lesson(), template_lesson(dayOfWeek=2)]},
    )
    assert updated.status_code == 200
    assert updated.json()["name"] == "First year"
    assert updated.json()["description"] == "Updated"
    assert len(updated.json()["lessons"]) == 2

    assert client.get(f"/api/templates/{template['id']}").json()["description"] == "Updated"
    assert client.delete(f"/api/templates/{template['id']}").json() == {"success": True}
    missing = client.get(f"/api/templates/{template['id']}")
    assert missing.status_code == 404
    assert missing.json()["message"] == f"Template with id {template['id']} not found"


def test_template_needs_lessons(client):
    assert create_template(client, lessons=[]).status_code == 422
    assert create_template(client, lessons=[template_lesson(endTime="08:00")]).status_code == 422


def test_templates_are_listed_newest_first(client, session_factory):
    db = session_factory()
    try:
        db.add_all(
            [
                ScheduleTemplate(
                    id="older",
                    name="Older",
                    lessons=[],
                    created_at=datetime(2026, 9, 1, tzinfo=timezone.utc),
                ),
                ScheduleTemplate(
                    id="newer",
                    name="Newer",
                    lessons=[],
                    created_at=datetime(2026, 10, 1, tzinfo=timezone.utc),
                ),
            ]
        )
        db.commit()
    finally:
        db.close()

    listed = client.get("/api/templates/").json()

    assert [item["id"] for item in listed] == ["newer", "older"]


def test_template_copies_lessons_from_schedule(client):
    schedule = create_schedule(client)
    client.post(f"/api/schedules/{schedule['id']}/lessons", json=template_lesson())
    client.post(f"/api/schedules/{schedule['id']}/lessons", json=template_lesson(dayOfWeek=3, teacherId=None))

    created = create_template(client, sourceScheduleId=schedule["id"])

    assert created.status_code == 201, created.text
    lessons = created.json()["lessons"]
    assert [(item["dayOfWeek"], item["teacherId"]) for item in lessons] == [(1, "T1"), (3, None)]
    assert "groupId" not in lessons[0]

    unknown = create_template(client, sourceScheduleId="nope")
    assert unknown.status_code == 404


def test_apply_template_adds_every_lesson(client):
    schedule = create_schedule(client)
    template = create_template(
        client, lessons=[template_lesson(), template_lesson(dayOfWeek=2, teacherId="T2", room="102")]
    ).json()

    applied = client.post(f"/api/schedules/{schedule['id']}/lessons/from-template/{template['id']}")

    assert applied.status_code == 201, applied.text
    lessons = applied.json()
    assert [(item["dayOfWeek"], item["groupId"]) for item in lessons] == [(1, "G1"), (2, "G1")]
    assert len(client.get(f"/api/schedules/{schedule['id']}").json()["lessons"]) == 2


def test_apply_template_is_all_or_nothing(client):
    first_group = create_schedule(client, group_id="G1")
    second_group = create_schedule(client, group_id="G2")
    busy = client.post(f"/api/schedules/{first_group['id']}/lessons", json=template_lesson()).json()
    template = create_template(
        client,
        lessons=[template_lesson(dayOfWeek=4, teacherId="T4", room="404"), template_lesson(startTime="10:00", endTime="11:00")],
    ).json()

    rejected = client.post(f"/api/schedules/{second_group['id']}/lessons/from-template/{template['id']}")

    assert rejected.status_code == 409
    details = rejected.json()["details"]
    assert details["templateId"] == template["id"]
    assert details["requested"] == 2
    assert [(item["lessonId"], item["dimension"]) for item in details["violations"]] == [
        (busy["id"], "teacher"),
        (busy["id"], "room"),
    ]
    assert client.get(f"/api/schedules/{second_group['id']}").json()["lessons"] == []


def test_apply_template_respects_teaching_day(client):
    schedule = create_schedule(client)
    template = create_template(client, lessons=[template_lesson(startTime="19:30", endTime="21:00")]).json()

    response = client.post(f"/api/schedules/{schedule['id']}/lessons/from-template/{template['id']}")

    assert response.status_code == 422
    assert client.post(f"/api/schedules/{schedule['id']}/lessons/from-template/missing").status_code == 404
