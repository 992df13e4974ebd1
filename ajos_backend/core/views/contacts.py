"""
Contacts view
The company column doubles as "role at company"; these helpers split and join it
"""

from typing import Any, Dict, List, Tuple

from models.entities import Contact

COMPANY_SEPARATORS = (" at ", " @ ", " - ", " | ")


def parse_company(value: str) -> Tuple[str, str]:
    """Split into (role, company); without a separator the whole text is the company"""
    if not value:
        return "", ""
    for separator in COMPANY_SEPARATORS:
        if separator in value:
            parts = value.split(separator)
            return parts[0].strip(), parts[1].strip()
    return "", value


def combine_company(role: str, company: str) -> str:
    role = (role or "").strip()
    company = (company or "").strip()
    if role and company:
        return f"{role} at {company}"
    return role or company


def build_contacts_view(contacts: List[Contact]) -> Dict[str, Any]:
    rows = []
    for contact in contacts:
        role, company = parse_company(contact.company)
        rows.append({**contact.model_dump(mode="json"), "role": role, "companyName": company})
    return {"contacts": rows, "total": len(contacts)}
