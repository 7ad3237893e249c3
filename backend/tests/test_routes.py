"""
MedCamp Backend — API Endpoint Tests
======================================

End-to-end through the FastAPI app (httpx ASGITransport) over an
in-memory store. Covers the wire format (camelCase fields), status codes
and the error envelope.
"""

import pytest

CAMP = {
    "title": "Health Camp",
    "date": "2026-11-02",
    "time": "09:00",
    "location": "Community Hall",
    "fees": 50,
    "healthcareProfessional": "Dr. Rahman",
    "images": ["https://img.example/health-camp.jpg"],
}

PAYMENT = {
    "transactionId": "pi_123",
    "paymentStatus": "paid",
    "paymentDate": "2026-10-18T10:00:00Z",
}


async def _create_camp(client, **overrides):
    response = await client.post("/camps", json={**CAMP, **overrides})
    assert response.status_code == 201
    return response.json()["insertedId"]


async def _register(client, camp_id, email="ana@example.org"):
    response = await client.post(
        "/registrations",
        json={"campId": camp_id, "participantEmail": email, "participantName": "Ana", "age": 30},
    )
    assert response.status_code == 201
    return response.json()["registrationId"]


class TestHealth:

    @pytest.mark.asyncio
    async def test_root_is_plain_text(self, test_client):
        response = await test_client.get("/")

        assert response.status_code == 200
        assert response.text == "Medical camp server is running"

    @pytest.mark.asyncio
    async def test_health_reports_store_and_payments(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["store"] == "connected"
        assert body["payments"] == "closed"

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.get("/camps", headers={"X-Request-ID": "abc123"})

        assert response.headers["X-Request-ID"] == "abc123"


class TestCampRoutes:

    @pytest.mark.asyncio
    async def test_create_and_get_camp(self, test_client):
        camp_id = await _create_camp(test_client)

        response = await test_client.get(f"/camps/{camp_id}")

        assert response.status_code == 200
        camp = response.json()
        assert camp["fee"] == 50
        assert camp["participant_count"] == 0
        assert camp["healthcareProfessional"] == "Dr. Rahman"

    @pytest.mark.asyncio
    async def test_create_without_image_is_400(self, test_client):
        response = await test_client.post("/camps", json={**CAMP, "images": []})

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_unknown_camp_is_404(self, test_client):
        response = await test_client.get("/camps/missing")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_update_and_delete(self, test_client):
        camp_id = await _create_camp(test_client)
        await _register(test_client, camp_id)

        updated = await test_client.put(f"/camps/{camp_id}", json={"location": "Clinic"})
        assert updated.status_code == 200
        assert updated.json()["modified"] is True
        assert updated.json()["camp"]["location"] == "Clinic"

        deleted = await test_client.delete(f"/camps/{camp_id}")
        assert deleted.status_code == 200
        assert deleted.json()["registrationsDeleted"] == 1
        assert (await test_client.get("/registrations")).json() == []

    @pytest.mark.asyncio
    async def test_reconcile(self, test_client):
        camp_id = await _create_camp(test_client)
        await _register(test_client, camp_id)

        response = await test_client.post(f"/camps/{camp_id}/reconcile")

        assert response.status_code == 200
        assert response.json() == {"campId": camp_id, "previous": 1, "current": 1}


class TestRegistrationFlow:

    @pytest.mark.asyncio
    async def test_register_pay_and_promote(self, test_client):
        await test_client.post("/users", json={"email": "ana@example.org", "name": "Ana"})
        camp_id = await _create_camp(test_client)

        registration_id = await _register(test_client, camp_id)
        assert (await test_client.get(f"/camps/{camp_id}")).json()["participant_count"] == 1

        paid = await test_client.patch(f"/registrations/{registration_id}/payment", json=PAYMENT)
        assert paid.status_code == 200
        body = paid.json()
        assert body["registration"]["paymentStatus"] == "paid"
        assert body["registration"]["confirmationStatus"] == "confirmed"
        assert body["paymentRecorded"] is True
        assert body["rolePromoted"] is True

        role = await test_client.get("/users/role/ana@example.org")
        assert role.json() == {"role": "participant"}

        payments = (await test_client.get("/payments", params={"email": "ana@example.org"})).json()
        assert len(payments) == 1
        assert payments[0]["amount"] == 50
        assert payments[0]["transactionId"] == "pi_123"

        dashboard = (await test_client.get("/analytics/dashboard")).json()
        assert dashboard == {
            "totalUsers": 1,
            "totalCamps": 1,
            "totalRegistrations": 1,
            "totalRevenue": 50,
        }

        count = await test_client.get("/analytics/registered-camps-count")
        assert count.status_code == 200
        assert count.json() == {"count": 1}

    @pytest.mark.asyncio
    async def test_missing_payment_date_is_400(self, test_client):
        camp_id = await _create_camp(test_client)
        registration_id = await _register(test_client, camp_id)

        response = await test_client.patch(
            f"/registrations/{registration_id}/payment",
            json={"transactionId": "pi_123", "paymentStatus": "paid"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Missing required payment info"
        assert (await test_client.get("/payments")).json() == []

    @pytest.mark.asyncio
    async def test_repeated_payment_is_idempotent(self, test_client):
        camp_id = await _create_camp(test_client)
        registration_id = await _register(test_client, camp_id)

        await test_client.patch(f"/registrations/{registration_id}/payment", json=PAYMENT)
        again = await test_client.patch(f"/registrations/{registration_id}/payment", json=PAYMENT)

        assert again.status_code == 200
        assert again.json()["alreadyRecorded"] is True
        assert len((await test_client.get("/payments")).json()) == 1

    @pytest.mark.asyncio
    async def test_transaction_reused_by_other_registration_is_409(self, test_client):
        camp_id = await _create_camp(test_client)
        first_id = await _register(test_client, camp_id)
        second_id = await _register(test_client, camp_id, email="ben@example.org")
        await test_client.patch(f"/registrations/{first_id}/payment", json=PAYMENT)

        response = await test_client.patch(f"/registrations/{second_id}/payment", json=PAYMENT)

        assert response.status_code == 409
        second = (await test_client.get(f"/registrations/{second_id}")).json()
        assert second["paymentStatus"] == "unpaid"
        assert len((await test_client.get("/payments")).json()) == 1

    @pytest.mark.asyncio
    async def test_delete_registration_decrements(self, test_client):
        camp_id = await _create_camp(test_client)
        registration_id = await _register(test_client, camp_id)

        response = await test_client.delete(f"/registrations/{registration_id}")

        assert response.status_code == 200
        assert response.json()["counterUpdated"] is True
        assert (await test_client.get(f"/camps/{camp_id}")).json()["participant_count"] == 0

    @pytest.mark.asyncio
    async def test_duplicate_registration_is_409(self, test_client):
        camp_id = await _create_camp(test_client)
        await _register(test_client, camp_id)

        response = await test_client.post(
            "/registrations", json={"campId": camp_id, "participantEmail": "ana@example.org"},
        )

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_register_for_missing_camp_is_404(self, test_client):
        response = await test_client.post(
            "/registrations", json={"campId": "missing", "participantEmail": "ana@example.org"},
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_transition_is_400(self, test_client):
        camp_id = await _create_camp(test_client)
        registration_id = await _register(test_client, camp_id)

        response = await test_client.patch(
            f"/registrations/{registration_id}", json={"confirmationStatus": "confirmed"},
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_camp_registration_listings(self, test_client):
        camp_id = await _create_camp(test_client)
        other_id = await _create_camp(test_client, title="Eye Camp")
        await _register(test_client, camp_id)
        await _register(test_client, other_id, email="ben@example.org")

        plural = (await test_client.get(f"/registrations/camps/{camp_id}")).json()
        singular = (await test_client.get(f"/registrations/camp/{camp_id}")).json()

        assert [r["participantEmail"] for r in plural] == ["ana@example.org"]
        assert singular == plural

    @pytest.mark.asyncio
    async def test_malformed_body_is_400(self, test_client):
        response = await test_client.post("/registrations", json={"participantEmail": "a@x.org"})

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"


class TestUserRoutes:

    @pytest.mark.asyncio
    async def test_duplicate_user_is_409(self, test_client):
        first = await test_client.post("/users", json={"email": "ana@example.org"})
        second = await test_client.post("/users", json={"email": "Ana@Example.org"})

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()["error"] == "conflict"

    @pytest.mark.asyncio
    async def test_query_by_email(self, test_client):
        await test_client.post("/users", json={"email": "ana@example.org", "name": "Ana"})

        response = await test_client.get("/users", params={"email": "ANA@example.org"})

        assert response.status_code == 200
        assert response.json()["name"] == "Ana"

    @pytest.mark.asyncio
    async def test_patch_profile(self, test_client):
        await test_client.post("/users", json={"email": "ana@example.org"})

        response = await test_client.patch("/users/ana@example.org", json={"name": "Ana B."})

        assert response.status_code == 200
        assert response.json()["message"] == "Profile updated successfully"
        assert response.json()["user"]["name"] == "Ana B."

    @pytest.mark.asyncio
    async def test_empty_patch_is_400(self, test_client):
        await test_client.post("/users", json={"email": "ana@example.org"})

        response = await test_client.patch("/users/ana@example.org", json={})

        assert response.status_code == 400


class TestPaymentRoutes:

    @pytest.mark.asyncio
    async def test_create_payment_intent(self, test_client, fake_payment_intents):
        response = await test_client.post("/create-payment-intent", json={"amount": 5000})

        assert response.status_code == 200
        assert response.json() == {"clientSecret": "pi_test_5000_secret"}
        assert fake_payment_intents.calls == [(5000, None)]

    @pytest.mark.asyncio
    async def test_direct_payment_insert(self, test_client):
        response = await test_client.post("/payments", json={"transactionId": "t1", "amount": 20})

        assert response.status_code == 201
        assert response.json()["inserted"] is True

    @pytest.mark.asyncio
    async def test_direct_payment_without_transaction_is_400(self, test_client):
        response = await test_client.post("/payments", json={"amount": 20})

        assert response.status_code == 400


class TestFeedbackRoutes:

    @pytest.mark.asyncio
    async def test_submit_and_list_feedback(self, test_client):
        camp_id = await _create_camp(test_client)

        created = await test_client.post(
            "/feedbacks", json={"camp_id": camp_id, "rating": 5, "comment": "Great"},
        )
        listed = await test_client.get("/feedbacks", params={"campId": camp_id})

        assert created.status_code == 201
        assert [f["rating"] for f in listed.json()] == [5]

    @pytest.mark.asyncio
    async def test_rating_out_of_range_is_400(self, test_client):
        response = await test_client.post("/feedbacks", json={"camp_id": "c1", "rating": 9})

        assert response.status_code == 400
