"""Walk one shipment through the workflow, including a lost login."""

import asyncio

from freightflow import ArtifactKind, WorkflowController, get_draft_store
from freightflow.auth import InMemoryTokenStore


async def refuse_refresh(carrier: str):
    return None


async def grant_refresh(carrier: str):
    return f"{carrier}-token"


async def main():
    """Quote, book, lose authentication, log in again and finish."""
    controller = WorkflowController(draft_store=get_draft_store("inmemory"))
    controller.start_new_shipment(
        {
            "Customer Name": "Acme Corp",
            "Ship to City": "Reno",
            "Ship to State": "NV",
            "Ship to Zip Code": "89501",
            "Quantity": "2",
            "Total Weight": "450",
        }
    )
    print(f"Rate quote draft: {controller.get_draft(1)}")

    controller.submit_step(
        {
            ArtifactKind.SELECTED_QUOTE: {
                "quote": {"quoteNumber": "Q-100"},
                "formData": {"paymentTermCd": "P", "shipmentDate": "2024-05-01T12:00"},
            }
        }
    )
    controller.update_field(2, "shipper.contactInfo.companyName", "Warehouse Co")

    tokens = InMemoryTokenStore(refresher=refuse_refresh)
    tokens.mark_session_active()
    result = await controller.check_authentication(tokens, "xpo")
    print(f"Token refresh failed, workflow suspended: {controller.suspended} ({result.outcome})")

    tokens = InMemoryTokenStore(refresher=grant_refresh)
    tokens.mark_session_active()
    result = await controller.check_authentication(tokens, "xpo")
    print(f"Logged in again, resumed at step {controller.current_step_id} ({result.outcome})")

    controller.submit_step(
        {
            ArtifactKind.GENERATED_DOCUMENT_RESPONSE: {
                "data": {"referenceNumbers": {"pro": "PRO-777"}}
            }
        }
    )
    print(f"Pickup draft: {controller.get_draft(3)}")

    controller.submit_step({ArtifactKind.PICKUP_RESPONSE: {"data": {"confirmationNbr": "PK-9"}}})
    print(f"Summary draft: {controller.get_draft(4)}")

    result = await controller.finish()
    print(f"Finished: {controller.finished} ({result.outcome})")


if __name__ == "__main__":
    asyncio.run(main())
