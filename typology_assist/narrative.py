from typing import Dict, List, Sequence

from .models import AdvisoryResult, Domain, Jurisdiction

# ------------------------------------------------------------------
#  Lookup tables
# ------------------------------------------------------------------
NARRATIVE_JURISDICTIONS: Dict[Jurisdiction, str] = {
    Jurisdiction.GLOBAL: "the relevant jurisdiction",
    Jurisdiction.IN: "India",
    Jurisdiction.EU: "the European Union",
    Jurisdiction.US: "the United States",
    Jurisdiction.OTHER: "the selected jurisdiction",
}

FILING_JURISDICTIONS: Dict[Jurisdiction, str] = {
    Jurisdiction.GLOBAL: "the institution's jurisdiction",
    Jurisdiction.IN: "India",
    Jurisdiction.EU: "an EU member state",
    Jurisdiction.US: "the United States",
    Jurisdiction.OTHER: "the relevant jurisdiction",
}

DOMAIN_NAMES: Dict[Domain, str] = {
    Domain.MARKETPLACE: "marketplace / platform",
    Domain.PSP: "payment gateway / PSP / fintech",
    Domain.BANKING: "banking",
    Domain.CARDS: "cards / chargebacks",
    Domain.CRYPTO: "crypto / VASP",
    Domain.REMITTANCE: "remittance / MSB",
}


def _jurisdiction(code: str, table: Dict[Jurisdiction, str], default: str) -> str:
    try:
        return table[Jurisdiction(code)]
    except ValueError:
        return default


def _domain(code: str) -> str:
    try:
        return DOMAIN_NAMES[Domain(code)]
    except ValueError:
        return "the selected domain"


def _main_typology(result: AdvisoryResult, default: str) -> str:
    return result.likely_typologies[0] if result.likely_typologies else default


# ------------------------------------------------------------------
#  Templates
# ------------------------------------------------------------------
def build_narrative(result: AdvisoryResult) -> str:
    """Internal narrative summary for the case file."""
    meta = result.meta
    country = _jurisdiction(meta.country, NARRATIVE_JURISDICTIONS, "the selected jurisdiction")
    domain = _domain(meta.domain)
    product = meta.product or "the product in scope"
    flags = " ".join(result.red_flags[:3])

    return (
        f"The scenario describes potentially unusual activity in {country} "
        f"within the {domain} context for {product}. \n"
        "Based on the observed pattern and available facts, the behaviour is broadly "
        f"consistent with {_main_typology(result, 'suspicious behaviour')}. \n"
        f"Key concerns include: {flags or 'limited information on specific red flags so far'}. \n"
        "These characteristics may indicate elevated financial crime risk and justify a more "
        "detailed review of the customer's profile, \n"
        "business model, and transaction history before any final conclusion is reached."
    )


def build_filing_paragraph(result: AdvisoryResult) -> str:
    """Draft STR / SAR paragraph."""
    country = _jurisdiction(result.meta.country, FILING_JURISDICTIONS, "the institution's jurisdiction")
    flags = "; ".join(result.red_flags)
    checks = "; ".join(result.recommended_checks[:4])

    return (
        f"This report relates to {_main_typology(result, 'suspected suspicious activity')} "
        f"identified through review of activity in {country}. \n"
        "The pattern appears inconsistent with the expected profile for this type of customer "
        "and product, in light of the following indicators: \n"
        f"{flags or 'limited documented red flags at this stage'}. \n"
        "Further actions recommended include: "
        f"{checks or 'obtaining additional contextual information and supporting documents'}. \n"
        "Depending on the outcome of these steps, the institution may consider filing a "
        "Suspicious Transaction/Activity Report with the competent authority, \n"
        "in line with internal policies and applicable legal obligations."
    )


def _section(lines: List[str], title: str, items: Sequence[str], blank_before: bool = True) -> None:
    if blank_before:
        lines.append("")
    lines.append(f"{title}:")
    lines.extend(f"- {item}" for item in items)


def build_full_card(result: AdvisoryResult) -> str:
    """Plain-text rendering of the whole advisory, for export."""
    lines: List[str] = []
    _section(lines, "Likely typologies", result.likely_typologies, blank_before=False)

    pa = result.priority_assessment
    lines.extend(["", f"Priority: {pa.level.value}"])
    if pa.rationale:
        lines.append(f"Why: {pa.rationale}")

    lines.extend(["", "Narrative summary:", build_narrative(result)])
    lines.extend(["", "Draft STR / SAR paragraph:", build_filing_paragraph(result)])

    _section(lines, "Red flags", result.red_flags)
    _section(lines, "Recommended checks", result.recommended_checks)
    _section(lines, "Country / regulator notes", result.country_notes)
    _section(lines, "Pitfalls to avoid", result.pitfalls_to_avoid)
    return "\n".join(lines) + "\n"
