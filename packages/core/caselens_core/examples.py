"""Bundled example case used by the demo adapter.

The example is the Irish DPC's 2022 decision fining Meta Platforms
Ireland EUR 405M over Instagram's handling of teenagers' contact data.
"""

EXAMPLE_URL = (
    "https://www.dataprotection.ie/sites/default/files/uploads/2023-01/"
    "Final%20Decision%20VIEC%20IN-21-2-5%20121222_Redacted.pdf"
)

EXAMPLE_TEXT = """\
Decision of the Data Protection Commission in the matter of Meta Platforms
Ireland Limited (Instagram), inquiry IN-20-7-4.

The inquiry examined the processing of personal data of child users aged
13 to 17. Children were able to operate business accounts, which published
their phone number and/or email address. Accounts of child users were set
to public by default during registration.

The Commission found infringements of Articles 5(1)(a), 5(1)(c), 6(1), 12(1),
24, 25(1), 25(2) and 35(1) GDPR and imposed an administrative fine of
EUR 405,000,000 together with an order to bring processing into compliance.
"""

EXAMPLE_SECTIONS: list[dict[str, str]] = [
    {
        "title": "1. Executive Summary: The EUR 405M Instagram Inquiry",
        "body": """# The Incident
In a decision concluded in **September 2022**, the Irish Data Protection Commission (DPC) imposed an **EUR 405 million administrative fine** on Meta Platforms Ireland Limited for the way Instagram processed the personal data of users aged 13 to 17.

## Core Violations
1. **Business Account Exposure**: children could switch to business accounts, which published their phone number and email address.
2. **Public-by-Default Onboarding**: accounts of users under 18 were public by default.

## Strategic Mitigation
- **Mandatory age assurance** at entry points.
- **Privacy as the standard** for vulnerable users.
- **Data minimization** for contact details.""",
    },
    {
        "title": "2. Legal Timeline & Procedural Milestones",
        "body": """- 21 Sep 2020: DPC commences inquiry into Instagram's processing of children's data.
- Dec 2021: DPC circulates its draft decision to concerned supervisory authorities.
- Jul 2022: EDPB adopts a binding decision under Art. 65 GDPR after objections.
- 2 Sep 2022: DPC adopts the final decision and the EUR 405M fine.""",
    },
    {
        "title": "3. The Legal Struggle: Defense vs Findings",
        "body": """Meta argued that switching to a business account was a deliberate user choice made to access analytics.
The DPC, supported by the EDPB, rejected this defense.
1. Minors lack the maturity to weigh the risks of publishing contact data.
2. The interface nudged children toward business accounts.
3. As controller, Meta failed to implement appropriate measures under Art. 24.""",
    },
    {
        "title": "4. PM Strategy & Design Constraints",
        "body": """- Disable business account upgrades for users verified as under 18.
- Default onboarding for 13 to 17 year olds to private.
- Gate any switch to public behind risk education and just-in-time notices.
A product whose growth loop depends on exposing children's data carries regulatory liability.""",
    },
    {
        "title": "5. DPO Technical Deep Dive",
        "body": """Meta relied on Art. 6(1)(b) (contractual necessity) for publishing contact details; the DPC found that publication was not objectively necessary.
- Art. 5(1)(c): data minimization.
- Art. 25: data protection by design and by default.
- Art. 35: the DPIA failed to address risks specific to minors.""",
    },
]


def _point(text: str, **extra: object) -> dict[str, object]:
    return {"text": text, **extra}


EXAMPLE_DECK: dict[str, object] = {
    "presentation_title": "Meta: The EUR 405M Instagram Inquiry",
    "subtitle": "Strategic breakdown of the Irish DPC children's data decision",
    "slides": [
        {
            "title": "Executive Synthesis",
            "kind": "title",
            "company_name": "Meta Platforms",
            "authority_name": "Irish DPC",
            "points": [
                _point(
                    "Strategic analysis of the EUR 405 million GDPR penalty for "
                    "default privacy settings of minor users.",
                    bold=True,
                )
            ],
        },
        {
            "title": "Agenda",
            "kind": "toc",
            "points": [
                _point("Strategic summary"),
                _point("Violations and timeline"),
                _point("Defense versus ruling"),
                _point("Technical deep dive and remediation"),
            ],
        },
        {
            "title": "Strategic Impact Overview",
            "kind": "strategic_summary",
            "points": [
                _point(
                    "What happened? Instagram exposed contact details of users "
                    "aged 13 to 17 through business accounts.",
                    bold=True,
                    color="#E11D48",
                ),
                _point(
                    "Why did it happen? Public-by-default onboarding and an "
                    "upgrade path that required publishing contact data."
                ),
                _point(
                    "How do we avoid this? Privacy by default for every "
                    "vulnerable user group."
                ),
            ],
            "authority_opinions": [
                "Privacy by default is a mandatory engineering standard.",
                "Fines must be effective and dissuasive.",
                "Children's data rights are an enforcement priority.",
            ],
        },
        {
            "title": "Core Violations",
            "kind": "content",
            "points": [
                _point("Contact data of minors published via business accounts."),
                _point("Child accounts public by default.", bold=True),
            ],
        },
        {
            "title": "Timeline",
            "kind": "content",
            "points": [
                _point("Sep 2020: inquiry opened", is_heading=True),
                _point("Jul 2022: EDPB binding decision under Art. 65"),
                _point("Sep 2022: final decision and EUR 405M fine", color="#4F46E5"),
            ],
        },
        {
            "title": "Defense vs Ruling",
            "kind": "content",
            "points": [
                _point("Defense: business accounts were a user choice."),
                _point("Ruling: minors cannot weigh the risk of publication."),
            ],
        },
        {
            "title": "Fine Rationale",
            "kind": "content",
            "points": [
                _point("Scale: millions of child users affected."),
                _point("Duration: processing ran for years."),
            ],
        },
        {
            "title": "Technical Deep Dive",
            "kind": "dpo_technical",
            "points": [
                _point("Art. 6(1)(b) was not a valid legal basis."),
                _point("Art. 25 by-default obligations breached.", bold=True),
            ],
        },
        {
            "title": "Product Strategy & Remediation",
            "kind": "pm_takeaway",
            "points": [
                _point("Age-gate account types."),
                _point("Default minors to private."),
                _point("Ship just-in-time privacy notices."),
            ],
        },
    ],
}
