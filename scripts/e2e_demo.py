#!/usr/bin/env python3
"""
End-to-end demo script for the Document to JSON extractor.

Prerequisites:
    1. API running: uvicorn docjson.main:app
    2. OPENAI_API_KEY set in .env

Usage:
    python scripts/e2e_demo.py invoice.pdf --prompt "Extract the invoice total"

    # Constrain the output with a JSON schema:
    python scripts/e2e_demo.py invoice.pdf scan.png --schema invoice.schema.json

    # Output raw JSON:
    python scripts/e2e_demo.py invoice.pdf --json
"""

import argparse
import base64
import json
import sys
from pathlib import Path

import httpx

# Configuration
API_BASE = "http://localhost:8000"
DEFAULT_PROMPT = "Extract the key facts from these documents."


def check_readiness(client: httpx.Client) -> dict:
    """Check readiness of the API."""
    try:
        resp = client.get(f"{API_BASE}/health/ready")
        return resp.json()
    except httpx.RequestError as e:
        return {"error": str(e)}


def list_models(client: httpx.Client) -> list[str]:
    resp = client.get(f"{API_BASE}/api/models")
    resp.raise_for_status()
    return resp.json()


def build_request(files: list[Path], prompt: str, schema: Path | None, model: str | None) -> dict:
    """Build the extraction request body, files base64-encoded."""
    body = {
        "prompt": prompt,
        "files": [
            {"fileName": path.name, "bytes": base64.b64encode(path.read_bytes()).decode("ascii")}
            for path in files
        ],
    }
    if schema is not None:
        body["jsonSchema"] = schema.read_text()
        body["schemaName"] = schema.stem.split(".")[0]
    if model:
        body["model"] = model
    return body


def extract(client: httpx.Client, body: dict) -> tuple[int, dict]:
    """POST the extraction request. Error statuses still carry a JSON body."""
    resp = client.post(f"{API_BASE}/api/extract", json=body)
    return resp.status_code, resp.json()


def print_extraction_result(data: dict) -> None:
    """Pretty print extraction results."""
    print("\n" + "=" * 60)
    print("EXTRACTION RESULTS")
    print("=" * 60)

    try:
        print(json.dumps(json.loads(data.get("data") or "null"), indent=2))
    except json.JSONDecodeError:
        print(data.get("data"))

    details = data.get("details", {})
    if details:
        print("\n--- Run ---")
        print(f"  Model:   {details['model']}")
        print(f"  Tokens:  {details['inputTokens']} in / {details['outputTokens']} out")
        print(f"  Latency: {details['latencyMs']} ms")
        print(f"  Cost:    ${details['estimatedCostUsd']:.5f}")

    for f in data.get("files", []):
        print(f"  {f['fileName']} -> {f['fileId']} ({f['sizeBytes']} bytes)")


def main() -> int:
    parser = argparse.ArgumentParser(description="Extract JSON from documents")
    parser.add_argument("files", nargs="+", type=Path, help="Files to send")
    parser.add_argument("--prompt", default=DEFAULT_PROMPT, help="What to extract")
    parser.add_argument("--schema", type=Path, help="JSON schema file for the output")
    parser.add_argument("--model", help="Model override")
    parser.add_argument("--json", action="store_true", help="Print the raw response JSON")
    args = parser.parse_args()

    missing = [str(p) for p in args.files if not p.is_file()]
    if missing:
        print(f"File(s) not found: {', '.join(missing)}", file=sys.stderr)
        return 1

    # No timeout: extraction can take minutes
    with httpx.Client(timeout=None) as client:
        readiness = check_readiness(client)
        if readiness.get("status") != "ok":
            print(f"API not ready: {readiness}", file=sys.stderr)
            return 1

        if args.model and args.model not in list_models(client):
            print(f"Warning: {args.model} is not in the model catalogue", file=sys.stderr)

        print(f"Extracting from {len(args.files)} file(s)...")
        status, data = extract(client, build_request(args.files, args.prompt, args.schema, args.model))

    if args.json:
        print(json.dumps(data, indent=2))
    elif data.get("isError"):
        print(f"Extraction failed ({status}): {data.get('error')}", file=sys.stderr)
    else:
        print_extraction_result(data)

    return 0 if not data.get("isError") else 2


if __name__ == "__main__":
    sys.exit(main())
