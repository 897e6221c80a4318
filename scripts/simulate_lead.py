"""
Simulate an inbound lead against a running LeadDesk server.

Usage:
    python scripts/simulate_lead.py
    python scripts/simulate_lead.py --email-variant
    python scripts/simulate_lead.py --name "Jane Doe" --service "Full detail"
    python scripts/simulate_lead.py --list --token "$ADMIN_TOKEN"
"""
import argparse
import asyncio
import logging

import httpx

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

BASE_URL = "http://localhost:10000"


async def submit_lead(base_url: str, name: str, email: str, service: str, email_variant: bool):
    """Post a test lead to the store-only or the store-and-mail endpoint."""
    payload = {
        "name": name,
        "email": email,
        "phone": "+31 6 1234 5678",
        "service": service,
        "message": f"Hi, could you send me a quote for {service.lower()}?",
        "source": "simulate_lead",
        "pageUrl": f"{base_url}/quote",
    }
    path = "/api/leads/email" if email_variant else "/api/leads"
    async with httpx.AsyncClient(timeout=30) as client:
        resp = await client.post(f"{base_url}{path}", json=payload)
        logger.info("Lead response: %s %s", resp.status_code, resp.json())
        return resp


async def list_leads(base_url: str, token: str):
    """Fetch stored leads through the admin API."""
    async with httpx.AsyncClient(timeout=30) as client:
        resp = await client.get(
            f"{base_url}/api/admin/leads",
            headers={"Authorization": f"Bearer {token}"},
        )
        data = resp.json()
        if not data.get("ok"):
            logger.error("Admin list failed: %s %s", resp.status_code, data.get("error"))
            return resp
        for row in data["rows"]:
            logger.info(
                "#%s %s %s <%s> %s [%s]",
                row["id"], row["createdAt"], row["name"], row["email"],
                row["service"], row["source"],
            )
        return resp


async def main():
    parser = argparse.ArgumentParser(description="Simulate inbound leads")
    parser.add_argument("--base-url", default=BASE_URL)
    parser.add_argument("--name", default="John Smith")
    parser.add_argument("--email", default="john@example.com")
    parser.add_argument("--service", default="Exterior wash")
    parser.add_argument("--email-variant", action="store_true", help="Use /api/leads/email")
    parser.add_argument("--list", action="store_true", help="List leads after submitting")
    parser.add_argument("--token", default="", help="Admin token for --list")
    args = parser.parse_args()

    await submit_lead(args.base_url, args.name, args.email, args.service, args.email_variant)
    if args.list:
        await list_leads(args.base_url, args.token)


if __name__ == "__main__":
    asyncio.run(main())
