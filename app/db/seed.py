# app/db/seed.py
from datetime import date, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from app.crud import account as account_crud
from app.crud import credential as credential_crud
from app.schemas.account import AccountCreate
from app.schemas.credential import CredentialCreate
from app.services.urgency import local_today

DEMO_ACCOUNTS = [
    {"id": "acc-01", "name": "Mercy General Hospital", "location_count": 3, "access_status": "fail", "city": "Columbus", "state": "OH"},
    {"id": "acc-02", "name": "St. Luke's Medical Center", "location_count": 5, "access_status": "pass", "city": "Boise", "state": "ID"},
    {"id": "acc-03", "name": "Riverside Health System", "location_count": 8, "access_status": "fail", "city": "Newport News", "state": "VA"},
    {"id": "acc-04", "name": "Lakeview Surgical Institute", "location_count": 1, "access_status": "pass", "city": "Chicago", "state": "IL"},
    {"id": "acc-05", "name": "Summit Children's Clinic", "location_count": 2, "access_status": "pass", "city": "Denver", "state": "CO"},
    # open invitations (registration not finished)
    {"id": "acc-06", "name": "Harbor Point Rehabilitation", "location_count": 1, "access_status": "fail", "registration_status": "pending", "city": "Tampa", "state": "FL"},
    {"id": "acc-07", "name": "Valley Oaks Medical Group", "location_count": 4, "access_status": "fail", "registration_status": "pending", "city": "Fresno", "state": "CA"},
]

# (id, name, category, status, days until expiration or None, required_by, description)
DEMO_CREDENTIALS = [
    ("cred-01", "Certificate of Liability Insurance", "document", "verified", 12, ["acc-01", "acc-02", "acc-03"], "General liability, $2M aggregate"),
    ("cred-02", "Business License", "document", "verified", 45, ["acc-02", "acc-04"], None),
    ("cred-03", "W-9 Form", "document", "verified", None, ["acc-01", "acc-02", "acc-03", "acc-04", "acc-05"], "Taxpayer identification"),
    ("cred-04", "Background Check Policy", "policy", "missing", 5, ["acc-01", "acc-03"], "Annual attestation of background checks"),
    ("cred-05", "HIPAA Compliance Attestation", "policy", "expired", -3, ["acc-03"], None),
    ("cred-06", "Vaccination Records", "document", "pending", 20, ["acc-01", "acc-05"], "Hepatitis B, influenza, MMR"),
    ("cred-07", "Product Recall Policy", "policy", "verified", 90, ["acc-04"], None),
    ("cred-08", "Workers' Compensation Certificate", "document", "verified", 3, ["acc-02", "acc-05"], None),
    ("cred-09", "Sterilization Procedure Policy", "policy", "missing", None, ["acc-06", "acc-07"], None),
    ("cred-10", "Vendor Code of Conduct", "policy", "verified", 26, ["acc-01", "acc-04", "acc-05"], "Signed acknowledgement"),
]


def seed_demo_records(db: Session, today: Optional[date] = None) -> int:
    """Insert demo accounts/credentials that are not there yet. Safe to rerun."""
    today = today or local_today()
    created = 0

    for a in DEMO_ACCOUNTS:
        if account_crud.get_account(db, a["id"]) is None:
            account_crud.create_account(db, AccountCreate(**a))
            created += 1

    for cid, name, category, status, days, required_by, description in DEMO_CREDENTIALS:
        if credential_crud.get_credential(db, cid) is not None:
            continue
        credential_crud.create_credential(
            db,
            CredentialCreate(
                id=cid,
                name=name,
                category=category,
                status=status,
                expiration_date=today + timedelta(days=days) if days is not None else None,
                required_by=required_by,
                description=description,
            ),
        )
        created += 1

    return created
