"""
Contact form endpoint.
"""

from html import escape

from fastapi import APIRouter
from pydantic import BaseModel

from app.api.deps import DashXDep
from app.models.schemas import MessageResponse


router = APIRouter()

SENDER = "noreply@dashxdemo.com"
SALES_INBOX = "sales@dashxdemo.com"

CONTACT_EMAIL_BODY = """<mjml>
  <mj-body>
    <mj-section>
      <mj-column>
        <mj-divider border-color="#F45E43"></mj-divider>
        <mj-text>Thanks for reaching out! We will get back to you soon!</mj-text>
        <mj-text>Your feedback: </mj-text>
        <mj-text>Name: {name}</mj-text>
        <mj-text>Email: {email}</mj-text>
        <mj-text>Feedback: {feedback}</mj-text>
        <mj-divider border-color="#F45E43"></mj-divider>
      </mj-column>
    </mj-section>
  </mj-body>
</mjml>"""


class ContactRequest(BaseModel):
    """Contact form submission."""

    name: str
    email: str
    feedback: str


@router.post("/contact", response_model=MessageResponse)
async def contact(request: ContactRequest, dashx: DashXDep):
    """Send the feedback to the sales inbox with a copy to the sender."""
    await dashx.deliver(
        "email",
        {
            "content": {
                "name": "Contact us",
                "from": SENDER,
                "to": [request.email, SALES_INBOX],
                "subject": "Contact Us Form",
                "html_body": CONTACT_EMAIL_BODY.format(
                    name=escape(request.name),
                    email=escape(request.email),
                    feedback=escape(request.feedback),
                ),
            }
        },
    )
    return MessageResponse(message="Thanks for reaching out! We will get back to you soon.")
