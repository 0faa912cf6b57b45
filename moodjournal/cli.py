"""
Command-line interface tools for the Mood Journal service.
"""

import asyncio
import json
from collections.abc import Coroutine
from typing import Any

import httpx
import typer

from .models import MoodEntry, Tip

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_ANON_KEY = "public-anon-key"

app = typer.Typer(help="Mood Journal CLI tools")

BaseUrl = typer.Option(
    DEFAULT_BASE_URL,
    "--url",
    "-u",
    envvar="MOODJOURNAL_URL",
    help="Base URL of the Mood Journal service",
)
AnonKey = typer.Option(
    DEFAULT_ANON_KEY,
    "--anon-key",
    envvar="MOODJOURNAL_ANON_KEY",
    help="Shared public credential",
)
Token = typer.Option(
    ...,
    "--token",
    "-t",
    envvar="MOODJOURNAL_TOKEN",
    help="Access token from the login command",
)


# MARK: - Commands


@app.command()
def signup(
    email: str = typer.Argument(..., help="Account email"),
    password: str = typer.Option(..., prompt=True, hide_input=True),
    name: str = typer.Option("", "--name", "-n", help="Display name"),
    base_url: str = BaseUrl,
    anon_key: str = AnonKey,
) -> None:
    """Create an account."""

    async def _signup() -> None:
        result = await _request(
            "POST",
            f"{base_url}/signup",
            anon_key,
            json={"email": email, "password": password, "name": name},
        )
        print(f"Created account {result['user']['email']}")

    _run_with_error_handling(_signup(), base_url)


@app.command()
def login(
    email: str = typer.Argument(..., help="Account email"),
    password: str = typer.Option(..., prompt=True, hide_input=True),
    base_url: str = BaseUrl,
    anon_key: str = AnonKey,
) -> None:
    """Sign in and print an access token."""

    async def _login() -> None:
        result = await _request(
            "POST",
            f"{base_url}/login",
            anon_key,
            json={"email": email, "password": password},
        )
        print(result["access_token"])

    _run_with_error_handling(_login(), base_url)


@app.command()
def add(
    emoji: str = typer.Argument(..., help="Emoji for the mood"),
    reason: str = typer.Argument(..., help="Why you feel this way"),
    tag: str = typer.Option("", "--tag", help="Optional category label"),
    token: str = Token,
    base_url: str = BaseUrl,
) -> None:
    """Record a new mood."""

    async def _add() -> None:
        result = await _request(
            "POST",
            f"{base_url}/moods",
            token,
            json={"emoji": emoji, "reason": reason, "tag": tag},
        )
        mood = MoodEntry.model_validate(result["mood"])
        print(f"Saved {mood.id}")

    _run_with_error_handling(_add(), base_url)


@app.command("list")
def list_moods(
    token: str = Token,
    base_url: str = BaseUrl,
    json_output: bool = typer.Option(False, "--json", "-j", help="Output raw JSON"),
) -> None:
    """List your moods, most recent first."""

    async def _list() -> None:
        result = await _request("GET", f"{base_url}/moods", token)

        if json_output:
            print(json.dumps(result, indent=2, ensure_ascii=False))
            return

        moods = [MoodEntry.model_validate(item) for item in result["moods"]]
        if not moods:
            print("No moods recorded")
        for mood in moods:
            print(_format_mood(mood))

    _run_with_error_handling(_list(), base_url)


@app.command()
def edit(
    mood_id: str = typer.Argument(..., help="Id of the mood to change"),
    emoji: str | None = typer.Option(None, "--emoji"),
    reason: str | None = typer.Option(None, "--reason"),
    tag: str | None = typer.Option(None, "--tag"),
    token: str = Token,
    base_url: str = BaseUrl,
) -> None:
    """Change a mood's emoji, reason or tag."""
    changes = {
        name: value
        for name, value in (("emoji", emoji), ("reason", reason), ("tag", tag))
        if value is not None
    }

    async def _edit() -> None:
        result = await _request("PUT", f"{base_url}/moods/{mood_id}", token, json=changes)
        print(_format_mood(MoodEntry.model_validate(result["mood"])))

    _run_with_error_handling(_edit(), base_url)


@app.command()
def remove(
    mood_id: str = typer.Argument(..., help="Id of the mood to delete"),
    token: str = Token,
    base_url: str = BaseUrl,
) -> None:
    """Delete a mood."""

    async def _remove() -> None:
        await _request("DELETE", f"{base_url}/moods/{mood_id}", token)
        print(f"Deleted {mood_id}")

    _run_with_error_handling(_remove(), base_url)


@app.command()
def quote(base_url: str = BaseUrl, anon_key: str = AnonKey) -> None:
    """Print a random motivational quote."""

    async def _quote() -> None:
        result = await _request("GET", f"{base_url}/quote", anon_key)
        print(result["quote"])

    _run_with_error_handling(_quote(), base_url)


@app.command()
def fact(base_url: str = BaseUrl, anon_key: str = AnonKey) -> None:
    """Print a random mood fact."""

    async def _fact() -> None:
        result = await _request("GET", f"{base_url}/fact", anon_key)
        print(result["fact"])

    _run_with_error_handling(_fact(), base_url)


@app.command()
def tips(
    sample: int | None = typer.Option(
        None, "--sample", "-s", help="Show only this many tips, shuffled"
    ),
    base_url: str = BaseUrl,
    anon_key: str = AnonKey,
) -> None:
    """Print wellbeing tips."""

    async def _tips() -> None:
        if sample is None:
            result = await _request("GET", f"{base_url}/tips", anon_key)
        else:
            result = await _request(
                "GET", f"{base_url}/tips/sample", anon_key, params={"k": sample}
            )
        for item in result["tips"]:
            tip = Tip.model_validate(item)
            print(f"[{tip.category}] {tip.content}")

    _run_with_error_handling(_tips(), base_url)


@app.command()
def serve() -> None:
    """Run the HTTP server."""
    from .server import main

    main()


# MARK: - Private Helpers


def _format_mood(mood: MoodEntry) -> str:
    """Format a mood as a single line."""
    timestamp = mood.created_at.astimezone().strftime("%Y-%m-%d %H:%M")
    tag = f" [{mood.tag}]" if mood.tag else ""
    return f"{timestamp} {mood.emoji} {mood.reason}{tag}  ({mood.id})"


async def _request(
    method: str, url: str, credential: str, **kwargs: Any
) -> dict[str, Any]:
    """Send an authenticated request and return the decoded JSON body."""
    async with httpx.AsyncClient() as client:
        response = await client.request(
            method, url, headers={"Authorization": f"Bearer {credential}"}, **kwargs
        )
        response.raise_for_status()
        return response.json()


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json().get("error") or f"HTTP {response.status_code}"
    except ValueError:
        return f"HTTP {response.status_code}"


def _run_with_error_handling(coro: Coroutine[Any, Any, Any], base_url: str) -> None:
    """Run an async coroutine with standardized error handling."""
    try:
        asyncio.run(coro)
    except KeyboardInterrupt:
        print("\nStopped")
        raise typer.Exit(0)
    except httpx.ConnectError:
        print(f"Error: Could not connect to {base_url}")
        raise typer.Exit(1)
    except httpx.HTTPStatusError as e:
        print(f"Error: HTTP {e.response.status_code}: {_error_message(e.response)}")
        raise typer.Exit(1)
    except Exception as e:
        error_msg = str(e) if str(e) else f"Unknown error of type {type(e).__name__}"
        print(f"Error: {error_msg}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
