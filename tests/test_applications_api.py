from datetime import datetime, timedelta

from sqlalchemy import func, select

from talentpool.models import JobApplication
from talentpool.utils.helpers import today

PDF_600KB = b"%PDF-1.4\n" + b"0" * (600 * 1024)


def pdf_upload(content=PDF_600KB, filename="resume.pdf", content_type="application/pdf"):
    return {"cv": (filename, content, content_type)}


async def count_applications(session_factory, **filters):
    query = select(func.count(JobApplication.id))
    for field, value in filters.items():
        query = query.where(getattr(JobApplication, field) == value)
    async with session_factory() as session:
        return await session.scalar(query)


async def load_application(session_factory, application_id):
    async with session_factory() as session:
        return await session.get(JobApplication, application_id)


# ---------------------------------------------------------------- apply


async def test_apply_with_pdf_stores_resume(
    client, auth, recruiter, candidate, make_offer, storage
):
    offer = await make_offer(recruiter)

    response = await client.post(
        f"/applications/job/{offer.id}",
        data={"cover_letter": "I would love to join."},
        files=pdf_upload(),
        headers=auth(candidate),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Application submitted successfully"
    application = body["application"]
    assert application["status"] == "pending"
    assert application["user_id"] == candidate.id
    assert application["cover_letter"] == "I would love to join."
    assert application["last_status_change"] is not None

    cv_path = application["cv_path"]
    assert cv_path.startswith(f"cvs/{candidate.id}/cv_{candidate.id}_")
    assert cv_path.endswith(".pdf")
    assert storage.resolve(cv_path).read_bytes() == PDF_600KB


async def test_apply_with_json_body(client, auth, recruiter, candidate, make_offer):
    offer = await make_offer(recruiter)

    response = await client.post(
        f"/applications/job/{offer.id}",
        json={"cover_letter": "Short and sweet."},
        headers=auth(candidate),
    )

    assert response.status_code == 201
    assert response.json()["application"]["cv_path"] is None


async def test_apply_without_body(client, auth, recruiter, candidate, make_offer):
    offer = await make_offer(recruiter)

    response = await client.post(f"/applications/job/{offer.id}", headers=auth(candidate))

    assert response.status_code == 201
    assert response.json()["application"]["cover_letter"] is None


async def test_second_application_to_same_offer_fails(
    client, auth, recruiter, candidate, make_offer, session_factory
):
    offer = await make_offer(recruiter)
    url = f"/applications/job/{offer.id}"

    first = await client.post(url, json={"cover_letter": "First"}, headers=auth(candidate))
    second = await client.post(url, json={"cover_letter": "Second"}, headers=auth(candidate))

    assert first.status_code == 201
    assert second.status_code == 400
    assert await count_applications(session_factory, user_id=candidate.id, job_offer_id=offer.id) == 1


async def test_duplicate_application_leaves_no_orphan_file(
    client, auth, recruiter, candidate, make_offer, make_application, storage
):
    offer = await make_offer(recruiter)
    await make_application(candidate, offer)

    response = await client.post(
        f"/applications/job/{offer.id}", files=pdf_upload(), headers=auth(candidate)
    )

    assert response.status_code == 400
    assert not (storage.root / "cvs").exists()


async def test_cannot_apply_to_inactive_expired_or_unknown_offer(
    client, auth, recruiter, candidate, make_offer, session_factory
):
    inactive = await make_offer(recruiter, is_active=False)
    expired = await make_offer(recruiter, expires_at=today() - timedelta(days=1))

    for offer_id in (inactive.id, expired.id, 999999):
        response = await client.post(f"/applications/job/{offer_id}", headers=auth(candidate))
        assert response.status_code == 400
        assert response.json()["detail"] == "Unable to apply to this job offer"

    assert await count_applications(session_factory) == 0


async def test_owner_recruiter_cannot_apply_to_inactive_offer(
    client, auth, recruiter, make_offer, session_factory
):
    offer = await make_offer(recruiter, is_active=False)

    response = await client.post(f"/applications/job/{offer.id}", headers=auth(recruiter))

    assert response.status_code == 403
    assert await count_applications(session_factory) == 0


async def test_non_candidates_fail_fast_on_apply(client, auth, recruiter, admin, make_offer):
    offer = await make_offer(recruiter)

    for user in (recruiter, admin):
        response = await client.post(
            f"/applications/job/{offer.id}",
            json={"cover_letter": "x" * 6000},
            headers=auth(user),
        )
        assert response.status_code == 403


async def test_cover_letter_too_long(client, auth, recruiter, candidate, make_offer):
    offer = await make_offer(recruiter)

    response = await client.post(
        f"/applications/job/{offer.id}",
        data={"cover_letter": "x" * 5001},
        headers=auth(candidate),
    )

    assert response.status_code == 422
    assert "cover_letter" in response.json()["errors"]


async def test_resume_must_be_pdf_or_word(
    client, auth, recruiter, candidate, make_offer, session_factory
):
    offer = await make_offer(recruiter)

    response = await client.post(
        f"/applications/job/{offer.id}",
        files=pdf_upload(b"plain text", filename="resume.txt", content_type="text/plain"),
        headers=auth(candidate),
    )

    assert response.status_code == 422
    assert response.json()["errors"]["cv"] == ["The cv must be a file of type: pdf, doc, docx."]
    assert await count_applications(session_factory) == 0


async def test_resume_mime_type_must_match_extension(client, auth, recruiter, candidate, make_offer):
    offer = await make_offer(recruiter)

    response = await client.post(
        f"/applications/job/{offer.id}",
        files=pdf_upload(b"<html></html>", filename="resume.pdf", content_type="text/html"),
        headers=auth(candidate),
    )

    assert response.status_code == 422
    assert "cv" in response.json()["errors"]


async def test_resume_larger_than_2mb_is_rejected(client, auth, recruiter, candidate, make_offer):
    offer = await make_offer(recruiter)
    too_big = b"%PDF-1.4\n" + b"0" * (2 * 1024 * 1024)

    response = await client.post(
        f"/applications/job/{offer.id}", files=pdf_upload(too_big), headers=auth(candidate)
    )

    assert response.status_code == 422
    assert response.json()["errors"]["cv"] == ["The cv may not be greater than 2048 kilobytes."]


async def test_empty_resume_is_rejected(client, auth, recruiter, candidate, make_offer):
    offer = await make_offer(recruiter)

    response = await client.post(
        f"/applications/job/{offer.id}", files=pdf_upload(b""), headers=auth(candidate)
    )

    assert response.status_code == 422
    assert response.json()["errors"]["cv"] == ["The cv failed to upload."]


async def test_docx_resume_is_accepted(client, auth, recruiter, candidate, make_offer):
    offer = await make_offer(recruiter)

    response = await client.post(
        f"/applications/job/{offer.id}",
        files=pdf_upload(
            b"PK\x03\x04docx",
            filename="My Resume.docx",
            content_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        ),
        headers=auth(candidate),
    )

    assert response.status_code == 201
    assert response.json()["application"]["cv_path"].endswith(".docx")


# ---------------------------------------------------------------- reads


async def test_candidate_lists_own_applications(
    client, auth, recruiter, candidate, other_candidate, make_offer, make_application
):
    first = await make_offer(recruiter)
    second = await make_offer(recruiter)
    mine = [await make_application(candidate, first), await make_application(candidate, second)]
    await make_application(other_candidate, first)

    response = await client.get("/applications/my", headers=auth(candidate))

    assert response.status_code == 200
    ids = {a["id"] for a in response.json()["applications"]}
    assert ids == {a.id for a in mine}


async def test_recruiter_cannot_list_my_applications(client, auth, recruiter):
    response = await client.get("/applications/my", headers=auth(recruiter))
    assert response.status_code == 403


async def test_offer_applications_visible_to_owner_and_admin_only(
    client, auth, recruiter, other_recruiter, admin, candidate, make_offer, make_application
):
    offer = await make_offer(recruiter)
    application = await make_application(candidate, offer)
    url = f"/applications/job/{offer.id}"

    for user in (recruiter, admin):
        response = await client.get(url, headers=auth(user))
        assert response.status_code == 200
        assert [a["id"] for a in response.json()["applications"]] == [application.id]

    for user in (other_recruiter, candidate):
        response = await client.get(url, headers=auth(user))
        assert response.status_code == 403


async def test_offer_applications_of_unknown_offer_is_403(client, auth, admin):
    response = await client.get("/applications/job/999999", headers=auth(admin))
    assert response.status_code == 403


async def test_show_application_embeds_offer_and_candidate(
    client, auth, recruiter, candidate, make_offer, make_application
):
    offer = await make_offer(recruiter, title="Platform Engineer")
    application = await make_application(candidate, offer, cover_letter="Hi")

    for user in (candidate, recruiter):
        response = await client.get(f"/applications/{application.id}", headers=auth(user))
        assert response.status_code == 200
        body = response.json()["application"]
        assert body["job_offer"]["title"] == "Platform Engineer"
        assert body["candidate"]["id"] == candidate.id
        assert body["candidate"]["email"] == candidate.email


async def test_show_application_hidden_from_strangers(
    client, auth, recruiter, other_recruiter, candidate, other_candidate, make_offer, make_application
):
    offer = await make_offer(recruiter)
    application = await make_application(candidate, offer)

    for user in (other_recruiter, other_candidate):
        response = await client.get(f"/applications/{application.id}", headers=auth(user))
        assert response.status_code == 403

    missing = await client.get("/applications/999999", headers=auth(recruiter))
    assert missing.status_code == 403


# ------------------------------------------------------------ status update


async def test_owner_updates_status_and_notes(
    client, auth, recruiter, candidate, make_offer, make_application, session_factory, notifier
):
    offer = await make_offer(recruiter)
    previous = datetime.utcnow() - timedelta(days=2)
    application = await make_application(candidate, offer, last_status_change=previous)

    response = await client.put(
        f"/applications/{application.id}/status",
        json={"status": "reviewing", "notes": "Strong profile"},
        headers=auth(recruiter),
    )

    assert response.status_code == 200
    assert response.json() == {"message": "Application status updated successfully"}
    stored = await load_application(session_factory, application.id)
    assert stored.status == "reviewing"
    assert stored.recruiter_notes == "Strong profile"
    assert stored.last_status_change >= previous
    assert notifier.calls == [(application.id, "pending", "reviewing")]


async def test_status_update_without_notes_keeps_existing_notes(
    client, auth, admin, recruiter, candidate, make_offer, make_application, session_factory
):
    offer = await make_offer(recruiter)
    application = await make_application(candidate, offer, recruiter_notes="Call back Monday")

    response = await client.put(
        f"/applications/{application.id}/status", json={"status": "accepted"}, headers=auth(admin)
    )

    assert response.status_code == 200
    stored = await load_application(session_factory, application.id)
    assert stored.status == "accepted"
    assert stored.recruiter_notes == "Call back Monday"


async def test_invalid_status_is_rejected(
    client, auth, recruiter, candidate, make_offer, make_application, notifier
):
    offer = await make_offer(recruiter)
    application = await make_application(candidate, offer)

    response = await client.put(
        f"/applications/{application.id}/status", json={"status": "hired"}, headers=auth(recruiter)
    )

    assert response.status_code == 422
    assert "status" in response.json()["errors"]
    assert notifier.calls == []


async def test_notes_longer_than_1000_are_rejected(
    client, auth, recruiter, candidate, make_offer, make_application
):
    offer = await make_offer(recruiter)
    application = await make_application(candidate, offer)

    response = await client.put(
        f"/applications/{application.id}/status",
        json={"status": "rejected", "notes": "n" * 1001},
        headers=auth(recruiter),
    )

    assert response.status_code == 422
    assert "notes" in response.json()["errors"]


async def test_status_update_denied_to_other_recruiter_and_candidate(
    client, auth, recruiter, other_recruiter, candidate, make_offer, make_application, session_factory
):
    offer = await make_offer(recruiter)
    application = await make_application(candidate, offer)

    for user in (other_recruiter, candidate):
        response = await client.put(
            f"/applications/{application.id}/status",
            json={"status": "accepted"},
            headers=auth(user),
        )
        assert response.status_code == 403

    stored = await load_application(session_factory, application.id)
    assert stored.status == "pending"


# ---------------------------------------------------------------- withdraw


async def test_candidate_withdraws_and_resume_is_deleted(
    client, auth, recruiter, candidate, make_offer, session_factory, storage
):
    offer = await make_offer(recruiter)
    created = await client.post(
        f"/applications/job/{offer.id}", files=pdf_upload(), headers=auth(candidate)
    )
    application = created.json()["application"]
    resume = storage.resolve(application["cv_path"])
    assert resume.exists()

    response = await client.delete(f"/applications/{application['id']}", headers=auth(candidate))

    assert response.status_code == 200
    assert response.json() == {"message": "Application withdrawn successfully"}
    assert await load_application(session_factory, application["id"]) is None
    assert not resume.exists()


async def test_withdraw_is_allowed_after_review(
    client, auth, recruiter, candidate, make_offer, make_application
):
    offer = await make_offer(recruiter)
    application = await make_application(candidate, offer, status="reviewing")

    response = await client.delete(f"/applications/{application.id}", headers=auth(candidate))

    assert response.status_code == 200


async def test_only_the_applicant_can_withdraw(
    client, auth, recruiter, admin, candidate, other_candidate, make_offer, make_application, session_factory
):
    offer = await make_offer(recruiter)
    application = await make_application(candidate, offer)

    for user in (other_candidate, recruiter, admin):
        response = await client.delete(f"/applications/{application.id}", headers=auth(user))
        assert response.status_code == 403

    assert await load_application(session_factory, application.id) is not None


# ------------------------------------------------------------ recent + stats


async def test_recent_applications_scoped_to_recruiter(
    client, auth, recruiter, other_recruiter, admin, candidate, other_candidate,
    make_offer, make_application,
):
    mine = await make_offer(recruiter)
    theirs = await make_offer(other_recruiter)
    a1 = await make_application(candidate, mine)
    a2 = await make_application(other_candidate, mine)
    a3 = await make_application(candidate, theirs)

    recruiter_view = await client.get("/applications/recent", headers=auth(recruiter))
    admin_view = await client.get("/applications/recent", headers=auth(admin))

    assert {a["id"] for a in recruiter_view.json()["applications"]} == {a1.id, a2.id}
    assert {a["id"] for a in admin_view.json()["applications"]} == {a1.id, a2.id, a3.id}


async def test_recent_applications_limit(
    client, auth, recruiter, candidate, other_candidate, make_user, make_offer, make_application
):
    offer = await make_offer(recruiter)
    applicants = [candidate, other_candidate, await make_user("candidate")]
    for applicant in applicants:
        await make_application(applicant, offer)

    limited = await client.get("/applications/recent", params={"limit": 2}, headers=auth(recruiter))
    clamped = await client.get("/applications/recent", params={"limit": 0}, headers=auth(recruiter))

    assert len(limited.json()["applications"]) == 2
    assert len(clamped.json()["applications"]) == 1


async def test_candidate_cannot_read_recent_applications(client, auth, candidate):
    response = await client.get("/applications/recent", headers=auth(candidate))
    assert response.status_code == 403


async def test_statistics_per_role_are_consistent(
    client, auth, admin, recruiter, other_recruiter, candidate, other_candidate,
    make_offer, make_application,
):
    first = await make_offer(recruiter, title="First")
    second = await make_offer(recruiter, title="Second", is_active=False)
    foreign = await make_offer(other_recruiter)
    await make_application(candidate, first, status="accepted")
    await make_application(other_candidate, first, status="pending")
    await make_application(candidate, second, status="rejected")
    await make_application(candidate, foreign, status="reviewing")

    candidate_stats = (await client.get("/applications/statistics", headers=auth(candidate))).json()["statistics"]
    recruiter_stats = (await client.get("/applications/statistics", headers=auth(recruiter))).json()["statistics"]
    admin_stats = (await client.get("/applications/statistics", headers=auth(admin))).json()["statistics"]

    assert candidate_stats["total_applications"] == 3
    assert candidate_stats["status_counts"] == {"pending": 0, "reviewing": 1, "accepted": 1, "rejected": 1}

    assert recruiter_stats["total_applications"] == 3
    assert recruiter_stats["total_offers"] == 2
    assert recruiter_stats["active_offers"] == 1
    assert recruiter_stats["offer_application_counts"] == {
        str(first.id): {"title": "First", "count": 2},
        str(second.id): {"title": "Second", "count": 1},
    }

    assert admin_stats["total_applications"] == 4
    assert admin_stats["total_offers"] == 3
    assert admin_stats["total_candidates"] == 2
    assert admin_stats["total_recruiters"] == 2

    for stats in (candidate_stats, recruiter_stats, admin_stats):
        assert sum(stats["status_counts"].values()) == stats["total_applications"]


async def test_statistics_keep_the_shape_of_each_scope(client, auth, admin, recruiter, candidate):
    shapes = {}
    for user in (admin, recruiter, candidate):
        response = await client.get("/applications/statistics", headers=auth(user))
        assert response.status_code == 200
        shapes[user.role] = set(response.json()["statistics"])

    common = {"total_applications", "status_counts"}
    assert shapes["candidate"] == common
    assert shapes["recruiter"] == common | {"total_offers", "active_offers", "offer_application_counts"}
    assert shapes["admin"] == common | {
        "total_offers", "active_offers", "total_candidates", "total_recruiters"
    }


async def test_statistics_role_must_match_caller(client, auth, candidate, recruiter):
    as_admin = await client.get(
        "/applications/statistics", params={"role": "admin"}, headers=auth(candidate)
    )
    other_user = await client.get(
        "/applications/statistics",
        params={"role": "recruiter", "user_id": candidate.id},
        headers=auth(recruiter),
    )

    assert as_admin.status_code == 403
    assert other_user.status_code == 403


async def test_admin_reads_candidate_statistics(
    client, auth, admin, recruiter, candidate, make_offer, make_application
):
    offer = await make_offer(recruiter)
    await make_application(candidate, offer)

    response = await client.get(
        "/applications/statistics",
        params={"role": "candidate", "user_id": candidate.id},
        headers=auth(admin),
    )

    assert response.status_code == 200
    assert response.json()["statistics"]["total_applications"] == 1


# -------------------------------------------------------------- resume file


async def test_offer_owner_downloads_resume(
    client, auth, recruiter, other_candidate, candidate, make_offer
):
    offer = await make_offer(recruiter)
    created = await client.post(
        f"/applications/job/{offer.id}", files=pdf_upload(), headers=auth(candidate)
    )
    application_id = created.json()["application"]["id"]

    response = await client.get(f"/applications/{application_id}/cv", headers=auth(recruiter))
    denied = await client.get(f"/applications/{application_id}/cv", headers=auth(other_candidate))

    assert response.status_code == 200
    assert response.content == PDF_600KB
    assert denied.status_code == 403


async def test_download_without_resume_is_403(
    client, auth, recruiter, candidate, make_offer, make_application
):
    offer = await make_offer(recruiter)
    application = await make_application(candidate, offer)

    response = await client.get(f"/applications/{application.id}/cv", headers=auth(candidate))

    assert response.status_code == 403
