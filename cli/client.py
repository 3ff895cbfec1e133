from __future__ import annotations

from typing import Any, Dict, List, NoReturn

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the assessment service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        headers = {"X-Caller-Id": config.caller_id} if config.caller_id else {}
        self._client = httpx.Client(
            base_url=config.base_url, timeout=config.timeout, headers=headers
        )

    def close(self) -> None:
        self._client.close()

    def create_assessment(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/assessments", json=payload)

    def get_assessment(self, assessment_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/assessments/{assessment_id}")

    def list_assessments(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/assessments")

    def update_assessment(self, assessment_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/assessments/{assessment_id}", json=payload)

    def delete_assessment(self, assessment_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/assessments/{assessment_id}")

    def append_usage(
        self, assessment_id: str, timestamp: int, consumption: float
    ) -> Dict[str, Any]:
        return self._request(
            "POST",
            f"/assessments/{assessment_id}/usage",
            json={"timestamp": timestamp, "consumption": consumption},
        )

    def get_usage_history(self, assessment_id: str) -> List[Dict[str, Any]]:
        return self._request("GET", f"/assessments/{assessment_id}/usage")

    def total_consumption(self, assessment_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/assessments/{assessment_id}/usage/total")

    def high_efficiency(self, threshold: float) -> List[Dict[str, Any]]:
        return self._request(
            "GET", "/assessments/high-efficiency", params={"threshold": threshold}
        )

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.TransportError as exc:
            typer.secho(
                f"Could not reach {self._config.base_url}: {exc}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1) from exc
        return response.json()

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> NoReturn:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
