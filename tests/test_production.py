"""
Tests for batches, flocks, mortality, births, weight tracking, egg collection and health records.
"""
from decimal import Decimal


def live_count(client, headers, path, subject_id):
    response = client.get(f"{path}/{subject_id}", headers=headers)
    assert response.status_code == 200
    return response.json()["current_stock"]


class TestBatchesAndFlocks:

    def test_new_batch_starts_with_received_birds(self, create_batch):
        batch = create_batch(quantity_ordered=1050, quantity_received=1000)

        assert batch["current_stock"] == 1000
        assert batch["status"] == "active"

    def test_received_cannot_exceed_ordered(self, client, staff_headers):
        payload = {
            "batch_name": "BATCH-X",
            "doc_arrival_date": "2025-01-01",
            "quantity_ordered": 100,
            "quantity_received": 120,
        }

        response = client.post("/batches/", json=payload, headers=staff_headers)

        assert response.status_code == 400

    def test_duplicate_batch_name_conflicts(self, client, staff_headers, create_batch):
        create_batch(batch_name="BATCH-DUP")
        payload = {
            "batch_name": "BATCH-DUP",
            "doc_arrival_date": "2025-01-01",
            "quantity_ordered": 100,
            "quantity_received": 100,
        }

        response = client.post("/batches/", json=payload, headers=staff_headers)

        assert response.status_code == 409

    def test_new_flock_starts_with_opening_stock(self, create_flock):
        flock = create_flock(opening_stock=750)

        assert flock["current_stock"] == 750

    def test_batch_with_feed_records_cannot_be_deleted(self, client, staff_headers, manager_headers, create_batch):
        batch = create_batch()
        payload = {
            "consumption_type": "batch",
            "batch_id": batch["id"],
            "consumption_date": "2025-01-03",
            "feed_quantity_bags": "2",
            "feed_price_per_bag": "950",
        }
        consumption = client.post("/feed/consumption/", json=payload, headers=staff_headers).json()

        response = client.delete(f"/batches/{batch['id']}", headers=manager_headers)

        assert response.status_code == 409
        assert response.json() == {"error": "Batch has linked records and cannot be deleted. Close it instead."}
        listed = client.get("/feed/consumption/", params={"batch_id": batch["id"]}, headers=staff_headers).json()
        assert [c["id"] for c in listed["consumptions"]] == [consumption["id"]]

    def test_flock_with_egg_collections_cannot_be_deleted(self, client, staff_headers, manager_headers, create_flock):
        flock = create_flock()
        eggs = {"flock_id": flock["id"], "collection_date": "2025-05-01", "good_eggs_count": 300}
        assert client.post("/egg-collection/", json=eggs, headers=staff_headers).status_code == 201

        response = client.delete(f"/flocks/{flock['id']}", headers=manager_headers)

        assert response.status_code == 409
        assert client.get(f"/flocks/{flock['id']}", headers=staff_headers).status_code == 200

    def test_unused_flock_can_be_deleted(self, client, staff_headers, manager_headers, create_flock):
        flock = create_flock()

        response = client.delete(f"/flocks/{flock['id']}", headers=manager_headers)

        assert response.status_code == 200
        assert client.get(f"/flocks/{flock['id']}", headers=staff_headers).status_code == 404


class TestMortality:
    """Deaths come off the live count and deleting a record gives them back."""

    def test_batch_mortality_updates_live_count(self, client, staff_headers, create_batch):
        batch = create_batch()
        payload = {"record_type": "batch", "batch_id": batch["id"], "mortality_date": "2025-01-05", "mortality_count": 10}

        response = client.post("/mortality/", json=payload, headers=staff_headers)

        assert response.status_code == 201
        assert Decimal(response.json()["mortality_rate"]) == Decimal("1.00")
        assert response.json()["flock_id"] is None
        assert live_count(client, staff_headers, "/batches", batch["id"]) == 990

    def test_edit_applies_difference(self, client, staff_headers, create_flock):
        flock = create_flock(opening_stock=500)
        payload = {"record_type": "flock", "flock_id": flock["id"], "mortality_date": "2025-01-05", "mortality_count": 5}
        record = client.post("/mortality/", json=payload, headers=staff_headers).json()

        response = client.put(f"/mortality/{record['id']}", json={"mortality_count": 8}, headers=staff_headers)

        assert response.status_code == 200
        assert live_count(client, staff_headers, "/flocks", flock["id"]) == 492

    def test_delete_restores_live_count(self, client, staff_headers, create_batch):
        batch = create_batch()
        payload = {"record_type": "batch", "batch_id": batch["id"], "mortality_date": "2025-01-05", "mortality_count": 10}
        record = client.post("/mortality/", json=payload, headers=staff_headers).json()

        response = client.delete(f"/mortality/{record['id']}", headers=staff_headers)

        assert response.status_code == 200
        assert live_count(client, staff_headers, "/batches", batch["id"]) == 1000

    def test_deaths_above_live_count_are_rejected(self, client, staff_headers, create_batch):
        batch = create_batch(quantity_ordered=5, quantity_received=5)
        payload = {"record_type": "batch", "batch_id": batch["id"], "mortality_date": "2025-01-05", "mortality_count": 9}

        response = client.post("/mortality/", json=payload, headers=staff_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Mortality count 9 exceeds the live count of 5"}
        assert live_count(client, staff_headers, "/batches", batch["id"]) == 5
        assert client.get("/mortality/", params={"batch_id": batch["id"]}, headers=staff_headers).json() == []

    def test_whole_batch_dying_then_deleted_restores_exactly(self, client, staff_headers, create_batch):
        batch = create_batch(quantity_ordered=5, quantity_received=5)
        payload = {"record_type": "batch", "batch_id": batch["id"], "mortality_date": "2025-01-05", "mortality_count": 5}
        record = client.post("/mortality/", json=payload, headers=staff_headers).json()
        assert live_count(client, staff_headers, "/batches", batch["id"]) == 0

        client.delete(f"/mortality/{record['id']}", headers=staff_headers)

        assert live_count(client, staff_headers, "/batches", batch["id"]) == 5

    def test_edit_above_live_count_is_rejected(self, client, staff_headers, create_flock):
        flock = create_flock(opening_stock=10)
        payload = {"record_type": "flock", "flock_id": flock["id"], "mortality_date": "2025-01-05", "mortality_count": 4}
        record = client.post("/mortality/", json=payload, headers=staff_headers).json()

        response = client.put(f"/mortality/{record['id']}", json={"mortality_count": 11}, headers=staff_headers)

        assert response.status_code == 400
        assert live_count(client, staff_headers, "/flocks", flock["id"]) == 6

    def test_unknown_flock_returns_404(self, client, staff_headers):
        payload = {"record_type": "flock", "flock_id": 321, "mortality_date": "2025-01-05", "mortality_count": 1}

        response = client.post("/mortality/", json=payload, headers=staff_headers)

        assert response.status_code == 404


class TestBirths:
    """Live births add to the live count; stillborn records add nothing."""

    def test_birth_adds_to_flock(self, client, staff_headers, create_flock):
        flock = create_flock(opening_stock=500)
        payload = {
            "record_type": "flock",
            "flock_id": flock["id"],
            "birth_date": "2025-03-01",
            "birth_count": 12,
            "male_count": 5,
            "female_count": 7,
        }

        response = client.post("/births/", json=payload, headers=staff_headers)

        assert response.status_code == 201, response.text
        assert response.json()["birds_added"] == 12
        assert response.json()["batch_id"] is None
        assert live_count(client, staff_headers, "/flocks", flock["id"]) == 512

    def test_stillborn_leaves_count_alone(self, client, staff_headers, create_batch):
        batch = create_batch()
        payload = {
            "record_type": "batch",
            "batch_id": batch["id"],
            "birth_date": "2025-03-01",
            "birth_count": 3,
            "health_status": "stillborn",
        }

        response = client.post("/births/", json=payload, headers=staff_headers)

        assert response.json()["birds_added"] == 0
        assert live_count(client, staff_headers, "/batches", batch["id"]) == 1000

    def test_target_id_is_required(self, client, staff_headers):
        payload = {"record_type": "batch", "birth_date": "2025-03-01", "birth_count": 3}

        response = client.post("/births/", json=payload, headers=staff_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"

    def test_unknown_batch_returns_404(self, client, staff_headers):
        payload = {"record_type": "batch", "batch_id": 77, "birth_date": "2025-03-01", "birth_count": 3}

        response = client.post("/births/", json=payload, headers=staff_headers)

        assert response.status_code == 404

    def test_delete_takes_birds_back(self, client, staff_headers, create_flock):
        flock = create_flock(opening_stock=100)
        payload = {"record_type": "flock", "flock_id": flock["id"], "birth_date": "2025-03-01", "birth_count": 10}
        record = client.post("/births/", json=payload, headers=staff_headers).json()

        response = client.delete(f"/births/{record['id']}", headers=staff_headers)
        listed = client.get("/births/", params={"flock_id": flock["id"]}, headers=staff_headers)

        assert response.status_code == 200
        assert live_count(client, staff_headers, "/flocks", flock["id"]) == 100
        assert listed.json() == []


class TestWeightTracking:

    def test_one_weighing_per_batch_per_day(self, client, staff_headers, create_batch):
        batch = create_batch()
        payload = {
            "batch_id": batch["id"],
            "weighing_date": "2025-01-08",
            "age_in_days": 7,
            "sample_size": 50,
            "average_weight": "0.18",
        }
        assert client.post("/weight-tracking/", json=payload, headers=staff_headers).status_code == 201

        response = client.post("/weight-tracking/", json=payload, headers=staff_headers)

        assert response.status_code == 409

    def test_unknown_batch_returns_404(self, client, staff_headers):
        payload = {
            "batch_id": 404,
            "weighing_date": "2025-01-08",
            "age_in_days": 7,
            "sample_size": 50,
            "average_weight": "0.18",
        }

        response = client.post("/weight-tracking/", json=payload, headers=staff_headers)

        assert response.status_code == 404


class TestEggCollection:

    def test_totals_and_production_percentage(self, client, staff_headers, create_flock):
        flock = create_flock(opening_stock=500)
        payload = {"flock_id": flock["id"], "collection_date": "2025-05-01", "good_eggs_count": 400, "broken_eggs_count": 10}

        response = client.post("/egg-collection/", json=payload, headers=staff_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["total_eggs_count"] == 410
        assert Decimal(body["production_percentage"]) == Decimal("82.00")

    def test_one_collection_per_flock_per_day(self, client, staff_headers, create_flock):
        flock = create_flock()
        payload = {"flock_id": flock["id"], "collection_date": "2025-05-01", "good_eggs_count": 300}
        client.post("/egg-collection/", json=payload, headers=staff_headers)

        response = client.post("/egg-collection/", json=payload, headers=staff_headers)

        assert response.status_code == 409
        assert response.json()["error"] == "Record conflicts with an existing one"


class TestHealthRecords:

    def test_vaccination_for_unknown_flock_returns_404(self, client, staff_headers):
        payload = {"flock_id": 99, "vaccination_date": "2025-02-01", "vaccine_name": "Newcastle"}

        response = client.post("/health/vaccination-records/", json=payload, headers=staff_headers)

        assert response.status_code == 404

    def test_vaccination_round_trip(self, client, staff_headers, create_flock):
        flock = create_flock()
        payload = {"flock_id": flock["id"], "vaccination_date": "2025-02-01", "vaccine_name": "Newcastle"}

        created = client.post("/health/vaccination-records/", json=payload, headers=staff_headers)
        listed = client.get("/health/vaccination-records/", params={"flock_id": flock["id"]}, headers=staff_headers)
        deleted = client.delete(f"/health/vaccination-records/{created.json()['id']}", headers=staff_headers)

        assert created.status_code == 201
        assert [r["vaccine_name"] for r in listed.json()] == ["Newcastle"]
        assert deleted.status_code == 200
