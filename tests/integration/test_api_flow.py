"""End-to-end HTTP flow against a real ledger database."""

from decimal import Decimal

from httpx import ASGITransport, AsyncClient

from printledger.api.main import app


class TestLedgerApiFlow:
    async def test_material_to_job_totals(self, ledger_db):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post(
                "/api/inventory/materials",
                json={"name": "PETG Orange", "type": "PETG", "unit": "kg", "min_stock": "2"},
            )
            assert response.status_code == 201
            material_id = response.json()["material"]["id"]
            assert response.json()["material"]["stock_status"] == "critical"

            response = await client.post(
                "/api/inventory/batches",
                json={"material_id": material_id, "original_qty": "10", "unit_cost": "2.00"},
            )
            assert response.status_code == 201
            assert response.json()["movement"]["type"] == "PURCHASE"

            response = await client.post(
                "/api/production/jobs", json={"name": "Cable clips", "estimated_hours": "5"}
            )
            assert response.status_code == 201
            job_id = response.json()["id"]

            response = await client.post(
                "/api/production/costs",
                json={"production_job_id": job_id, "material_id": material_id, "quantity": "10"},
            )
            assert response.status_code == 201

            response = await client.get(
                "/api/production/costs/totals", params={"job_id": job_id}
            )
            assert response.status_code == 200
            totals = response.json()["totals"]
            assert Decimal(totals["material_cost"]) == Decimal("20.00")

            response = await client.get(f"/api/inventory/materials/{material_id}")
            assert Decimal(response.json()["stock"]) == Decimal("0")

            response = await client.post(
                "/api/inventory/movements",
                json={"type": "CONSUMPTION", "material_id": material_id, "quantity": "1"},
            )
            assert response.status_code == 400
            assert response.json()["error_code"] == "INSUFFICIENT_STOCK"

            response = await client.get(
                "/api/inventory/movements", params={"material_id": material_id}
            )
            assert response.json()["pagination"]["total"] == 2
