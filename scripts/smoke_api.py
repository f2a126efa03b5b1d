#!/usr/bin/env python3
"""
Smoke test - one N-Score call and, if an image is given, one recognition call.

Runs against a deployed stage over HTTP, or against the Lambda entry points
in-process (real upstream calls, needs GOOGLE_API_KEY).

Usage:
    python scripts/smoke_api.py --base-url https://.../dev
    python scripts/smoke_api.py --mode local --image meal.jpg
"""

import argparse
import base64
import json
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).parent / ".env")

parser = argparse.ArgumentParser(description="Nutri Scan smoke test")
parser.add_argument("--mode", "-m", default="api", choices=["api", "local"], help="Test mode")
parser.add_argument("--base-url", "-u", help="API base URL (or set STAGING_API_URL)")
parser.add_argument("--image", "-i", help="JPEG to send to /analyze")
args = parser.parse_args()

BASE_URL = (args.base_url or os.getenv("STAGING_API_URL") or "").rstrip("/")

SCORE_BODY = {
    "totalNutrition": {
        "calories": 640, "protein": 38.2, "fat": 21.5, "carbs": 71.0,
        "sugar": 9.4, "fiber": 8.1, "sodium": 910, "totalWeight": 420,
    },
    "foodNames": ["grilled chicken", "brown rice", "broccoli"],
}

SUPPORTED_FOODS = ["apple", "banana", "broccoli", "brown rice", "grilled chicken", "orange"]


def call_api(path: str, body: dict) -> dict:
    import requests
    if not BASE_URL:
        print("ERROR: --base-url required or set STAGING_API_URL in scripts/.env")
        sys.exit(1)
    resp = requests.post(f"{BASE_URL}{path}", json=body, timeout=60)
    return {"status": resp.status_code, "body": resp.text}


def call_local(path: str, body: dict) -> dict:
    sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "services" / "nutri-scan"))
    from index import lambda_handler
    result = lambda_handler({"httpMethod": "POST", "path": path, "body": json.dumps(body)}, None)
    return {"status": result["statusCode"], "body": result["body"]}


call = call_api if args.mode == "api" else call_local

print(f"=== NUTRI SCAN SMOKE TEST ({args.mode}) ===")
if args.mode == "api":
    print(f"URL: {BASE_URL}")

print("--- N-SCORE ---")
print(json.dumps(call("/get-n-score", SCORE_BODY), indent=2))

if args.image:
    print("--- ANALYZE ---")
    image_data = base64.b64encode(Path(args.image).read_bytes()).decode("ascii")
    result = call("/analyze", {"base64ImageData": image_data, "supportedFoods": SUPPORTED_FOODS})
    print(json.dumps(result, indent=2))
