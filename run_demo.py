import sys

import httpx

API_BASE = "http://localhost:4000/api"
EMAIL = "admin@example.com"
PASSWORD = "password"


def run_demo():
    print(f"Logging in as {EMAIL}...")
    try:
        resp = httpx.post(f"{API_BASE}/auth/login", json={"email": EMAIL, "password": PASSWORD}, timeout=10.0)
        resp.raise_for_status()
        headers = {"Authorization": f"Bearer {resp.json()['token']}"}

        # Answer the default ISO 9001 checklist: every other item passes
        checklists = httpx.get(f"{API_BASE}/checklists/defaults", timeout=10.0).json()
        template = checklists[0]
        checklist = [
            {**item, "passed": i % 2 == 0}
            for i, item in enumerate(template["items"])
        ]
        achieved = sum(it["weight"] for it in checklist if it["passed"])
        possible = sum(it["weight"] for it in checklist)

        print(f"Submitting audit against {template['standard']}...")
        resp = httpx.post(
            f"{API_BASE}/audits",
            json={
                "name": "Demo audit",
                "standard": template["standard"],
                "checklist": checklist,
                "score": {
                    "totalAchieved": achieved,
                    "totalPossible": possible,
                    "percent": round(100 * achieved / possible) if possible else 0,
                },
                "auditor": "Demo",
                "notes": "Generated by run_demo.py",
            },
            headers=headers,
            timeout=10.0,
        )
        resp.raise_for_status()
        audit_id = resp.json()["id"]
        print(f"Audit stored. ID: {audit_id}")

        print("Downloading PDF...")
        pdf_resp = httpx.get(f"{API_BASE}/reports/{audit_id}/pdf", headers=headers, timeout=60.0)
        pdf_resp.raise_for_status()

        filename = f"{audit_id}.pdf"
        with open(filename, "wb") as f:
            f.write(pdf_resp.content)
        print(f"PDF saved to {filename}")

    except httpx.HTTPError as e:
        print(f"Error: {e}")
        sys.exit(1)

if __name__ == "__main__":
    run_demo()
