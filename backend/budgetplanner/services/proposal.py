"""Proposal email body for a priced quote.

Only the HTML is produced here; sending it is left to the caller's mail
provider.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from html import escape
from typing import TYPE_CHECKING

from budgetplanner.formatting import format_currency
from budgetplanner.models.enums import PropertyType

if TYPE_CHECKING:
    from budgetplanner.models.quote import Quote

DEFAULT_SUBJECT = "Your Technology Budget from Gamma Tech"
COMPANY_NAME = "Gamma Tech Services"
COMPANY_ADDRESS = "3106 Horseshoe Dr S, Naples, FL 34116"
COMPANY_PHONE = "(239) 330-4939"
COMPANY_SITE = "gamma.tech"

_SUBTITLES = {
    PropertyType.RESIDENTIAL: "Residential Technology Budget",
    PropertyType.CONDO: "Condo Technology Budget",
}

_CELL = "padding: 12px 16px; border-bottom: 1px solid #E0E0E0;"
_HEAD = (
    "padding: 14px 16px; font-weight: 600; color: #393939; "
    "border-bottom: 1px solid #E0E0E0;"
)


@dataclass(frozen=True)
class ProposalRow:
    name: str
    tier: str
    price: float


@dataclass(frozen=True)
class Proposal:
    """Everything the proposal email shows."""

    total: float
    tier_label: str
    property_type: PropertyType
    rows: list[ProposalRow] = field(default_factory=list)
    recipient_name: str | None = None
    subject: str = DEFAULT_SUBJECT


def build_proposal(
    quote: Quote,
    recipient_name: str | None = None,
    subject: str | None = None,
) -> Proposal:
    """Collect the proposal data for ``quote``."""
    return Proposal(
        total=quote.totals.grand_total,
        tier_label=quote.tier_label,
        property_type=quote.property_type,
        rows=[ProposalRow(**row) for row in quote.to_proposal_rows()],
        recipient_name=recipient_name or None,
        subject=subject or DEFAULT_SUBJECT,
    )


def _category_table(rows: list[ProposalRow]) -> str:
    if not rows:
        return ""
    body = "".join(
        f"""
          <tr>
            <td style="{_CELL} font-weight: 500;">{escape(row.name)}</td>
            <td style="{_CELL} text-transform: capitalize;">{escape(row.tier)}</td>
            <td style="{_CELL} text-align: right;">{format_currency(row.price)}</td>
          </tr>"""
        for row in rows
    )
    return f"""
              <table width="100%" cellpadding="0" cellspacing="0" style="border: 1px solid #E0E0E0; border-radius: 12px; margin-bottom: 32px;">
                <tr style="background-color: #F5F5F5;">
                  <th style="{_HEAD} text-align: left;">Category</th>
                  <th style="{_HEAD} text-align: left;">Tier</th>
                  <th style="{_HEAD} text-align: right;">Estimate</th>
                </tr>{body}
              </table>"""


def render_proposal_email(proposal: Proposal) -> str:
    """Render the proposal as a standalone HTML email body.

    All user-provided text (recipient and category names) is HTML-escaped.
    """
    greeting = (
        f"Hi {escape(proposal.recipient_name)}," if proposal.recipient_name else "Hi,"
    )
    tier_line = (
        f'<p style="margin: 8px 0 0; color: #017ED7; font-size: 14px;">'
        f"{escape(proposal.tier_label)}</p>"
        if proposal.tier_label
        else ""
    )
    subtitle = _SUBTITLES.get(proposal.property_type, _SUBTITLES[PropertyType.RESIDENTIAL])

    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{escape(proposal.subject)}</title>
</head>
<body style="margin: 0; padding: 0; background-color: #FAFAFA; font-family: -apple-system, 'Segoe UI', Roboto, Helvetica, Arial, sans-serif;">
  <table width="100%" cellpadding="0" cellspacing="0" style="padding: 40px 20px;">
    <tr>
      <td align="center">
        <table width="600" cellpadding="0" cellspacing="0" style="background-color: #FFFFFF; border-radius: 16px;">
          <tr>
            <td style="background: #0F2F44; padding: 32px 40px; text-align: center;">
              <h1 style="margin: 0; color: #FFFFFF; font-size: 24px;">{COMPANY_NAME}</h1>
              <p style="margin: 8px 0 0; color: #D6E2EA; font-size: 14px;">{subtitle}</p>
            </td>
          </tr>
          <tr>
            <td style="padding: 40px;">
              <p style="margin: 0 0 24px; color: #393939; font-size: 16px;">{greeting}</p>
              <p style="margin: 0 0 32px; color: #393939; font-size: 16px;">
                Thank you for your interest in {COMPANY_NAME}. Below is your personalized technology budget based on your selections.
              </p>
              <table width="100%" cellpadding="0" cellspacing="0" style="background: #EEF8FE; border-radius: 12px; margin-bottom: 32px;">
                <tr>
                  <td style="padding: 24px; text-align: center;">
                    <p style="margin: 0; color: #5A5A5A; font-size: 14px; text-transform: uppercase;">Estimated Investment</p>
                    <p style="margin: 8px 0 0; color: #0F2F44; font-size: 36px; font-weight: 700;">{format_currency(proposal.total)}</p>
                    {tier_line}
                  </td>
                </tr>
              </table>{_category_table(proposal.rows)}
              <p style="margin: 0 0 16px; color: #5A5A5A; font-size: 14px;">
                This is a preliminary budget estimate. Final pricing may vary based on site conditions, specific equipment selections, and installation requirements.
              </p>
              <p style="margin: 0; color: #393939; font-size: 16px;">
                Ready to move forward? Reply to this email or call us at <strong>{COMPANY_PHONE}</strong> to schedule a consultation.
              </p>
            </td>
          </tr>
          <tr>
            <td style="background-color: #F5F5F5; padding: 24px 40px; text-align: center;">
              <p style="margin: 0; color: #5A5A5A; font-size: 14px;">
                <strong>{COMPANY_NAME}</strong><br>
                {COMPANY_ADDRESS}<br>
                {COMPANY_PHONE} &bull; {COMPANY_SITE}
              </p>
            </td>
          </tr>
        </table>
      </td>
    </tr>
  </table>
</body>
</html>
"""
