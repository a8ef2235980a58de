"""Request builders shared by the API tests."""

from __future__ import annotations

from fastapi.testclient import TestClient


def register(client: TestClient, pincode: str = "560001", **overrides):
    payload = {
        "name": "Asha",
        "phone": "919800000001",
        "email": "asha@example.com",
        "pincode": pincode,
    }
    payload.update(overrides)
    return client.post("/api/locals/register", json=payload)


def ticket_form(code: str, **overrides) -> dict:
    form = {
        "name": "Marco",
        "phone": "393400000002",
        "email": "marco@example.com",
        "referralCode": code,
        "originCity": "Milan",
        "travelDate": "2026-11-02",
    }
    form.update(overrides)
    return {k: v for k, v in form.items() if v is not None}


def upload(client: TestClient, data: dict, content: bytes = b"%PDF-1.4 ticket", filename: str = "ticket.pdf"):
    files = {"ticketFile": (filename, content, "application/pdf")} if content is not None else None
    return client.post("/api/visitors/upload", data=data, files=files)
