#!/usr/bin/env python3
"""
ACC Transcript Backend Status Checker
Show runtime health of a running server
"""

import argparse
import json
from typing import Any, Dict, Optional

import requests
from rich.console import Console
from rich.table import Table

console = Console()

DEFAULT_BASE_URL = "http://localhost:3400"


def check_http_health(url: str, timeout: int = 5) -> Dict[str, Any]:
    """Check HTTP health endpoint"""
    try:
        response = requests.get(url, timeout=timeout)

        if response.status_code == 200:
            try:
                data = response.json()
                return {'healthy': True, 'status_code': 200, 'data': data}
            except json.JSONDecodeError:
                return {'healthy': True, 'status_code': 200, 'data': None}
        else:
            return {'healthy': False, 'status_code': response.status_code, 'data': None}

    except requests.exceptions.ConnectionError:
        return {'healthy': False, 'error': 'Connection refused'}
    except requests.exceptions.Timeout:
        return {'healthy': False, 'error': 'Timeout'}


def list_tools(base_url: str, timeout: int = 5) -> Dict[str, Any]:
    """Ask the JSON-RPC endpoint for its tool catalogue (no credential needed)"""
    try:
        response = requests.post(
            f"{base_url}/mcp",
            json={"jsonrpc": "2.0", "id": 1, "method": "tools/list"},
            timeout=timeout,
        )
        if response.status_code != 200:
            return {'ok': False, 'status_code': response.status_code, 'tools': []}
        tools = response.json().get('result', {}).get('tools', [])
        return {'ok': True, 'status_code': 200, 'tools': [tool['name'] for tool in tools]}
    except requests.exceptions.ConnectionError:
        return {'ok': False, 'error': 'Connection refused', 'tools': []}
    except requests.exceptions.Timeout:
        return {'ok': False, 'error': 'Timeout', 'tools': []}


def check_api_key(base_url: str, api_key: str, timeout: int = 5) -> Dict[str, Any]:
    """Verify an API key against /mcp/me"""
    try:
        response = requests.get(
            f"{base_url}/mcp/me",
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=timeout,
        )
        if response.status_code == 200:
            return {'valid': True, 'user': response.json().get('user')}
        return {'valid': False, 'status_code': response.status_code}
    except requests.exceptions.ConnectionError:
        return {'valid': False, 'error': 'Connection refused'}
    except requests.exceptions.Timeout:
        return {'valid': False, 'error': 'Timeout'}


def collect_status(base_url: str, api_key: Optional[str] = None) -> Dict[str, Any]:
    base_url = base_url.rstrip("/")
    status = {
        'base_url': base_url,
        'health': check_http_health(f"{base_url}/health"),
        'tools': list_tools(base_url),
    }
    if api_key:
        status['api_key'] = check_api_key(base_url, api_key)
    return status


def show_status(status: Dict[str, Any]) -> None:
    console.print(f"\n🏥 [bold]ACC Transcript Backend Status[/bold] ({status['base_url']})\n")

    table = Table(title="Status Overview")
    table.add_column("Check", style="cyan", no_wrap=True)
    table.add_column("Result", justify="center")
    table.add_column("Details", style="dim")

    health = status['health']
    table.add_row(
        "health",
        "✅" if health.get('healthy') else "❌",
        health.get('error') or str(health.get('status_code', '')),
    )

    tools = status['tools']
    table.add_row(
        "tools/list",
        "✅" if tools.get('ok') else "❌",
        ", ".join(tools.get('tools', [])) or tools.get('error', ''),
    )

    if 'api_key' in status:
        key_status = status['api_key']
        user = key_status.get('user') or {}
        table.add_row(
            "api key",
            "✅" if key_status.get('valid') else "❌",
            user.get('email', '') or key_status.get('error', '') or str(key_status.get('status_code', '')),
        )

    console.print(table)


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(
        description="ACC Transcript Backend Status Checker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  acc-transcript-status                          Check the local server
  acc-transcript-status --url http://host:3400   Check another server
  acc-transcript-status --api-key KEY            Also verify an API key
  acc-transcript-status --json                   Output status in JSON format
        """
    )
    parser.add_argument('--url', default=DEFAULT_BASE_URL, help='Server base URL')
    parser.add_argument('--api-key', help='API key to verify against /mcp/me')
    parser.add_argument('--json', '-j', action='store_true', help='Output status in JSON format')
    args = parser.parse_args(argv)

    status = collect_status(args.url, args.api_key)

    if args.json:
        print(json.dumps(status, indent=2))
    else:
        show_status(status)

    healthy = status['health'].get('healthy') and status['tools'].get('ok')
    if 'api_key' in status:
        healthy = healthy and status['api_key'].get('valid')
    return 0 if healthy else 1


if __name__ == "__main__":
    raise SystemExit(main())
