from datetime import timedelta

from halo_leads.exceptions import UpstreamError
from halo_leads.models import AnalyticsEvent, Lead, MarketingLead


def _submission(campaign_id, **overrides):
    payload = {
        "campaign_id": campaign_id,
        "name": "Hank Homeowner",
        "address": "123 Main St, Springfield",
        "email": " Hank@Example.com ",
        "phone": "(555) 123-4567",
        "notes": "Shingles in the yard",
    }
    payload.update(overrides)
    return payload


# ===== PUBLIC INTAKE =====

def test_submit_lead(client, db, make_campaign, notifier):
    campaign = make_campaign()

    response = client.post("/api/leads", json=_submission(campaign.id))

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    lead = db.query(Lead).filter(Lead.id == body["lead_id"]).one()
    assert lead.email == "hank@example.com"
    assert lead.job_status == "new"

    notifier.send_lead_notification.assert_called_once()
    kwargs = notifier.send_lead_notification.call_args.kwargs
    assert kwargs["contractor_email"] == "contractor-1@example.com"
    assert kwargs["landing_page_url"].endswith(f"/c/{campaign.page_slug}")


def test_duplicate_submission_is_rejected(client, db, make_campaign):
    campaign = make_campaign()

    assert client.post("/api/leads", json=_submission(campaign.id)).status_code == 201
    response = client.post("/api/leads", json=_submission(campaign.id, email="hank@example.com"))

    assert response.status_code == 409
    assert db.query(Lead).count() == 1


def test_submission_validation(client, make_campaign):
    campaign = make_campaign()
    cases = [
        ({"email": None}, "All required fields must be provided"),
        ({"email": "not-an-email"}, "Invalid email format"),
        ({"phone": "555-1234"}, "Phone number must be 10 digits"),
        ({"name": "H"}, "Name must be at least 2 characters"),
        ({"address": "Main St"}, "Please provide a complete address"),
    ]
    for overrides, detail in cases:
        response = client.post("/api/leads", json=_submission(campaign.id, **overrides))
        assert response.status_code == 400
        assert response.json()["detail"] == detail


def test_submission_to_unknown_or_inactive_campaign(client, make_campaign):
    assert client.post("/api/leads", json=_submission("missing")).status_code == 404

    campaign = make_campaign(status="Inactive")
    response = client.post("/api/leads", json=_submission(campaign.id))
    assert response.status_code == 400
    assert response.json()["detail"] == "This campaign is no longer accepting submissions"


def test_marketing_lead(client, db, notifier):
    payload = {"name": "Kim Contractor", "email": "Kim@Example.com", "source": "pricing"}

    first = client.post(
        "/api/marketing-leads?utm_source=google&utm_campaign=spring",
        json=payload,
        headers={"User-Agent": "pytest-agent"},
    )
    assert first.status_code == 200
    lead = db.query(MarketingLead).one()
    assert lead.email == "kim@example.com"
    assert lead.utm_source == "google"
    event = db.query(AnalyticsEvent).one()
    assert event.lead_id == lead.id
    assert event.user_agent == "pytest-agent"
    notifier.send_marketing_notification.assert_called_once()

    second = client.post("/api/marketing-leads", json=payload)
    assert second.status_code == 429
    assert db.query(MarketingLead).count() == 1


def test_marketing_lead_validation(client):
    assert client.post("/api/marketing-leads", json={"email": "a@b.co"}).status_code == 400
    assert client.post("/api/marketing-leads", json={"name": "Kim", "email": "nope"}).status_code == 400


# ===== AUTHORIZATION =====

def test_lead_requires_owner(client, make_campaign, make_lead, auth_headers):
    lead = make_lead(make_campaign())

    assert client.get(f"/api/leads/{lead.id}").status_code == 401
    assert client.get(f"/api/leads/{lead.id}", headers={"Authorization": "Bearer junk"}).status_code == 401

    foreign = client.get(f"/api/leads/{lead.id}", headers=auth_headers("contractor-2"))
    assert foreign.status_code == 404
    assert foreign.json()["detail"] == "Lead not found"

    own = client.get(f"/api/leads/{lead.id}", headers=auth_headers())
    assert own.status_code == 200
    assert own.json()["email"] == "home@example.com"


def test_patch_lead_status(client, make_campaign, make_lead, auth_headers):
    lead = make_lead(make_campaign())

    response = client.patch(f"/api/leads/{lead.id}", json={"job_status": "contacted"}, headers=auth_headers())
    assert response.status_code == 200
    assert response.json()["job_status"] == "contacted"

    bad = client.patch(f"/api/leads/{lead.id}", json={"job_status": "lost"}, headers=auth_headers())
    assert bad.status_code == 400


# ===== CAMPAIGNS =====

def test_create_campaign_and_public_lookup(client, auth_headers):
    headers = auth_headers("contractor-7")

    first = client.post("/api/campaigns", json={"campaign_name": "Oak Street Storm Damage"}, headers=headers)
    second = client.post("/api/campaigns", json={"campaign_name": "Oak Street Storm Damage"}, headers=headers)

    assert first.status_code == 201
    assert first.json()["slug"] == "oak-street-storm-damage"
    assert second.json()["slug"] == "oak-street-storm-damage-1"

    public = client.get("/api/campaigns/slug/oak-street-storm-damage")
    assert public.status_code == 200
    assert public.json()["campaign_name"] == "Oak Street Storm Damage"
    assert "contractor_id" not in public.json()


def test_campaign_settings(client, make_campaign, auth_headers):
    campaign = make_campaign(slug="maple-hail")

    response = client.patch(
        f"/api/campaigns/{campaign.id}/settings",
        json={"service_radius_miles": 10, "campaign_status": "Inactive"},
        headers=auth_headers(),
    )
    assert response.status_code == 200
    assert response.json()["service_radius_miles"] == 10
    assert response.json()["page_slug"] == "maple-hail"
    assert client.get("/api/campaigns/slug/maple-hail").status_code == 404

    bad = client.patch(
        f"/api/campaigns/{campaign.id}/settings", json={"service_radius_miles": 7}, headers=auth_headers()
    )
    assert bad.status_code == 400

    foreign = client.patch(
        f"/api/campaigns/{campaign.id}/settings", json={"service_radius_miles": 3},
        headers=auth_headers("contractor-2"),
    )
    assert foreign.status_code == 404


def test_qr_code(client, make_campaign, auth_headers):
    campaign = make_campaign()
    response = client.put(
        f"/api/campaigns/{campaign.id}/qr-code",
        json={"qr_code_url": "https://cdn.example.com/qr.png"},
        headers=auth_headers(),
    )
    assert response.status_code == 200
    assert response.json()["qr_code_url"] == "https://cdn.example.com/qr.png"


# ===== MAP =====

def test_map_leads(client, make_campaign, make_lead, auth_headers, geocoder):
    campaign = make_campaign()
    make_lead(campaign, email="a@example.com", age=timedelta(hours=30))
    make_lead(campaign, email="b@example.com", address=None)
    make_lead(campaign, email="c@example.com", job_status="completed")

    response = client.get(f"/api/campaigns/{campaign.id}/map-leads", headers=auth_headers())

    assert response.status_code == 200
    body = response.json()
    assert body["metadata"] == {
        "total_leads": 2,
        "mapped_leads": 1,
        "leads_without_address": 1,
        "leads_with_failed_geocode": 0,
    }
    mapped = [lead for lead in body["leads"] if lead["location"]]
    assert mapped[0]["location"] == {"lat": 39.78, "lng": -89.65}
    assert mapped[0]["status"] == "uncontacted"
    geocoder.geocode.assert_called_once()


def test_map_leads_survives_geocode_failure(client, make_campaign, make_lead, auth_headers, geocoder):
    campaign = make_campaign()
    make_lead(campaign)
    geocoder.geocode.side_effect = UpstreamError("Geocoding failed: ZERO_RESULTS")

    response = client.get(f"/api/campaigns/{campaign.id}/map-leads", headers=auth_headers())

    assert response.status_code == 200
    body = response.json()
    assert body["leads"][0]["location"] is None
    assert body["metadata"]["leads_with_failed_geocode"] == 1


def test_map_leads_requires_owner(client, make_campaign, auth_headers, geocoder):
    campaign = make_campaign()
    response = client.get(f"/api/campaigns/{campaign.id}/map-leads", headers=auth_headers("contractor-2"))
    assert response.status_code == 404
    geocoder.geocode.assert_not_called()


# ===== DASHBOARD =====

def test_job_flow(client, make_campaign, make_lead, auth_headers):
    lead = make_lead(make_campaign())
    headers = auth_headers()

    promoted = client.post(
        "/api/dashboard/jobs",
        json={"lead_id": lead.id, "scheduled_inspection_date": "2024-05-01", "inspector": "Bob"},
        headers=headers,
    )
    assert promoted.status_code == 201
    assert promoted.json()["status"] == "scheduled"
    assert promoted.json()["customer_name"] == "Hank Homeowner"

    jobs = client.get("/api/dashboard/jobs", headers=headers).json()["jobs"]
    assert [job["id"] for job in jobs["scheduled"]] == [lead.id]
    assert jobs["completed"] == []

    listed = client.get("/api/dashboard/leads", headers=headers).json()["leads"]
    assert listed == []

    done = client.patch(f"/api/dashboard/jobs/{lead.id}", json={"status": "completed"}, headers=headers)
    assert done.json()["status"] == "completed"

    reopened = client.patch(f"/api/dashboard/jobs/{lead.id}", json={"status": "scheduled"}, headers=headers)
    assert reopened.json()["completed_at"] is None

    back = client.post(f"/api/dashboard/jobs/{lead.id}/unschedule", headers=headers)
    assert back.status_code == 200
    assert back.json()["job_status"] == "new"
    assert back.json()["is_promoted"] is False


def test_contact_attempt_and_cold_bucket(client, make_campaign, make_lead, auth_headers):
    lead = make_lead(make_campaign())
    headers = auth_headers()

    bad = client.patch(
        f"/api/dashboard/leads/{lead.id}/contact-attempt",
        json={"contact_attempt": "2", "is_cold_lead": False},
        headers=headers,
    )
    assert bad.status_code == 400

    ok = client.patch(
        f"/api/dashboard/leads/{lead.id}/contact-attempt",
        json={"contact_attempt": 2, "is_cold_lead": True, "inspector": "Ann"},
        headers=headers,
    )
    assert ok.status_code == 200
    assert ok.json()["is_cold_lead"] is True
    assert ok.json()["inspector"] == "Ann"

    restored = client.patch(f"/api/dashboard/leads/{lead.id}/restore", headers=headers)
    assert restored.json()["is_cold_lead"] is False
    assert restored.json()["contact_attempt"] == 2

    cold = client.post(f"/api/dashboard/jobs/{lead.id}/cold", headers=headers)
    assert cold.json()["is_cold_lead"] is True


def test_tentative_date_routes(client, make_campaign, make_lead, auth_headers):
    lead = make_lead(make_campaign())
    headers = auth_headers()

    dated = client.patch(
        f"/api/dashboard/leads/{lead.id}/tentative-date", json={"tentative_date": "2024-07-04"}, headers=headers
    )
    assert dated.status_code == 200
    assert dated.json()["tentative_date"].startswith("2024-07-04T12:00")

    cleared = client.delete(f"/api/dashboard/leads/{lead.id}/tentative-date", headers=headers)
    assert cleared.json()["tentative_date"] is None


def test_summary_and_lead_filters(client, make_campaign, make_lead, auth_headers):
    campaign = make_campaign()
    make_campaign(status="Inactive")
    make_lead(campaign, email="a@example.com")
    make_lead(campaign, email="b@example.com", job_status="contacted", age=timedelta(days=10))
    headers = auth_headers()

    summary = client.get("/api/dashboard/summary", headers=headers).json()
    assert summary["stats"] == {
        "total_campaigns": 2,
        "active_campaigns": 1,
        "total_leads": 2,
        "recent_leads": 1,
    }
    assert len(summary["recent_leads"]) == 2

    contacted = client.get("/api/dashboard/leads?job_status=contacted", headers=headers).json()["leads"]
    assert [lead["email"] for lead in contacted] == ["b@example.com"]
    assert contacted[0]["campaign_name"] == "Oak Street Storm Damage"

    assert client.get("/api/dashboard/leads?job_status=bogus", headers=headers).status_code == 400


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_dashboard_campaigns(client, db, make_campaign, make_lead, auth_headers):
    older = make_campaign(slug="older-campaign", name="Older")
    newer = make_campaign(slug="newer-campaign", name="Newer")
    make_campaign(contractor_id="contractor-2", slug="someone-else")
    older.created_at = newer.created_at - timedelta(days=1)
    db.commit()
    make_lead(newer, email="a@example.com")
    make_lead(newer, email="b@example.com")

    response = client.get("/api/dashboard/campaigns", headers=auth_headers())

    assert response.status_code == 200
    campaigns = response.json()["campaigns"]
    assert [c["page_slug"] for c in campaigns] == ["newer-campaign", "older-campaign"]
    assert [c["lead_count"] for c in campaigns] == [2, 0]


def test_dashboard_campaign_details(client, make_campaign, make_lead, auth_headers):
    campaign = make_campaign(slug="oak-street")
    make_lead(campaign, email="old@example.com", age=timedelta(hours=5))
    make_lead(campaign, email="new@example.com")

    response = client.get(f"/api/dashboard/campaigns/{campaign.id}", headers=auth_headers())

    assert response.status_code == 200
    body = response.json()
    assert body["campaign"]["page_slug"] == "oak-street"
    assert [lead["email"] for lead in body["leads"]] == ["new@example.com", "old@example.com"]

    foreign = client.get(f"/api/dashboard/campaigns/{campaign.id}", headers=auth_headers("contractor-2"))
    assert foreign.status_code == 404
    assert foreign.json()["detail"] == "Campaign not found"

    assert client.get("/api/dashboard/campaigns/missing", headers=auth_headers()).status_code == 404
