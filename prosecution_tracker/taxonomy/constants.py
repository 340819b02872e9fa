"""
USPTO transaction-code taxonomy: canonical code definitions.

Format: each entry is a dict that maps 1:1 to TaxonomyEntry fields.
Entries are grouped by category in canonical order; the registry relies on
that order when it builds its index (first definition of a code wins).

Categories:
  entity_status  Applicant size declarations (drive the discount timeline)
  filing_fee     Filing and additional filing fees
  issue_fee      Issue fee payments
  rce            Request for Continued Examination
  appeal         Appeal-related actions
  milestone      Prosecution milestones (completion, rejections, abandonment)
  other_fee      Other fee-related actions
"""

CATEGORY_ORDER: tuple[str, ...] = (
    "entity_status",
    "filing_fee",
    "issue_fee",
    "rce",
    "appeal",
    "milestone",
    "other_fee",
)

TRANSACTION_CODES: list[dict] = [
    # ══════════════════════════════════════════════════════════════════════════
    # entity_status
    # ══════════════════════════════════════════════════════════════════════════
    {
        "code": "BIG.",
        "category": "entity_status",
        "label": "Large Entity (Undiscounted)",
        "icon": "building",
        "color": "#DC2626",
    },
    {
        "code": "SMAL",
        "category": "entity_status",
        "label": "Small Entity",
        "icon": "store",
        "color": "#2563EB",
    },
    {
        "code": "MICR",
        "category": "entity_status",
        "label": "Micro Entity",
        "icon": "user",
        "color": "#059669",
    },
    # ══════════════════════════════════════════════════════════════════════════
    # filing_fee
    # ══════════════════════════════════════════════════════════════════════════
    {
        "code": "FEE.",
        "category": "filing_fee",
        "label": "Fee Payment",
        "icon": "dollar-sign",
        "color": "#7C3AED",
    },
    {
        "code": "FLFEE",
        "category": "filing_fee",
        "label": "Additional Filing Fee",
        "icon": "dollar-sign",
        "color": "#7C3AED",
    },
    {
        "code": "ADDFLFEE",
        "category": "filing_fee",
        "label": "Additional Filing Fees",
        "icon": "dollar-sign",
        "color": "#7C3AED",
    },
    # ══════════════════════════════════════════════════════════════════════════
    # issue_fee
    # ══════════════════════════════════════════════════════════════════════════
    {
        "code": "IFEE",
        "category": "issue_fee",
        "label": "Issue Fee Paid",
        "icon": "award",
        "color": "#D97706",
    },
    {
        "code": "IFEEHA",
        "category": "issue_fee",
        "label": "Issue Fee (Hague)",
        "icon": "award",
        "color": "#D97706",
    },
    # ══════════════════════════════════════════════════════════════════════════
    # rce
    # ══════════════════════════════════════════════════════════════════════════
    {
        "code": "BRCE",
        "category": "rce",
        "label": "RCE Filed",
        "icon": "refresh-cw",
        "color": "#EC4899",
    },
    {
        "code": "FRCE",
        "category": "rce",
        "label": "RCE Complete",
        "icon": "check-circle",
        "color": "#EC4899",
    },
    # ══════════════════════════════════════════════════════════════════════════
    # appeal
    # ══════════════════════════════════════════════════════════════════════════
    {
        "code": "AP.B",
        "category": "appeal",
        "label": "Appeal Brief Filed",
        "icon": "file-text",
        "color": "#F59E0B",
    },
    {
        "code": "AP.C",
        "category": "appeal",
        "label": "Pre-Appeal Conference",
        "icon": "users",
        "color": "#F59E0B",
    },
    {
        "code": "APOH",
        "category": "appeal",
        "label": "Oral Hearing Request",
        "icon": "mic",
        "color": "#F59E0B",
    },
    # ══════════════════════════════════════════════════════════════════════════
    # milestone
    # ══════════════════════════════════════════════════════════════════════════
    {
        "code": "COMP",
        "category": "milestone",
        "label": "Application Complete",
        "icon": "check",
        "color": "#6B7280",
    },
    {
        "code": "371COMP",
        "category": "milestone",
        "label": "371 National Stage Complete",
        "icon": "globe",
        "color": "#6B7280",
    },
    {
        "code": "CTNF",
        "category": "milestone",
        "label": "Non-Final Rejection",
        "icon": "x-circle",
        "color": "#EF4444",
    },
    {
        "code": "CTFR",
        "category": "milestone",
        "label": "Final Rejection",
        "icon": "x-octagon",
        "color": "#B91C1C",
    },
    {
        "code": "DIST",
        "category": "milestone",
        "label": "Terminal Disclaimer",
        "icon": "scissors",
        "color": "#6B7280",
    },
    {
        "code": "ABN6",
        "category": "milestone",
        "label": "Abandoned (No Issue Fee)",
        "icon": "alert-triangle",
        "color": "#991B1B",
    },
    # ══════════════════════════════════════════════════════════════════════════
    # other_fee
    # ══════════════════════════════════════════════════════════════════════════
    {
        "code": "IRFND",
        "category": "other_fee",
        "label": "Refund Requested",
        "icon": "rotate-ccw",
        "color": "#6B7280",
    },
    {
        "code": "EIDS.",
        "category": "other_fee",
        "label": "Electronic IDS",
        "icon": "list",
        "color": "#6B7280",
    },
    {
        "code": "M923",
        "category": "other_fee",
        "label": "371 Supplemental Fees Missing",
        "icon": "alert-circle",
        "color": "#DC2626",
    },
]

# Entity-status code → fee-discount tier it declares
ENTITY_STATUS_RATES: dict[str, str] = {
    "BIG.": "undiscounted",
    "SMAL": "small",
    "MICR": "micro",
}
