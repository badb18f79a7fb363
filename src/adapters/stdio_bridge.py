"""Line-delimited JSON transport for the host bridge.

Request:  {"id": 1, "cmd": "run_o2", "args": {"key": "tbis.snapshot"}}
Response: {"id": 1, "ok": true, "value": "...", "error": null, "kind": null}

Requests run on a small thread pool, so a slow script does not block a port
probe; responses can therefore arrive out of order and carry the request id.
"""

from __future__ import annotations

import json
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, TextIO

from core.domain.errors import BadRequest
from core.domain.models import BridgeResponse
from core.services.bridge import HostBridge

logger = logging.getLogger(__name__)


def _parse_request(line: str) -> tuple[Any, str, Any]:
    try:
        req = json.loads(line)
    except json.JSONDecodeError as exc:
        raise BadRequest(f"Invalid JSON request: {exc}") from exc
    if not isinstance(req, dict):
        raise BadRequest("Request must be a JSON object")

    cmd = req.get("cmd")
    if not isinstance(cmd, str) or not cmd:
        raise BadRequest("Request is missing 'cmd'")
    return req.get("id"), cmd, req.get("args")


class StdioBridge:
    def __init__(self, bridge: HostBridge, stdin: TextIO, stdout: TextIO, workers: int = 4) -> None:
        self._bridge = bridge
        self._stdin = stdin
        self._stdout = stdout
        self._workers = workers
        # Re-entrant: the focus signal handler writes from the main thread.
        self._write_lock = threading.RLock()

    def _send(self, response: BridgeResponse) -> None:
        line = json.dumps(response.model_dump(mode="json"), ensure_ascii=False)
        with self._write_lock:
            self._stdout.write(line + "\n")
            self._stdout.flush()

    def send_event(self, name: str) -> None:
        """Unsolicited notification for the host (no request id)."""

        line = json.dumps({"event": name})
        with self._write_lock:
            self._stdout.write(line + "\n")
            self._stdout.flush()

    def _handle(self, request_id: Any, cmd: str, args: Any) -> BridgeResponse:
        response = self._bridge.invoke(cmd, args, request_id=request_id)
        self._send(response)
        return response

    def _on_done(self, request_id: Any, cmd: str, future: Future) -> None:
        """Every request gets a line, even when its handler has a bug."""

        exc = future.exception()
        if exc is None:
            return
        logger.error("bridge command %s crashed", cmd, exc_info=exc)
        self._send(
            BridgeResponse(
                id=request_id,
                ok=False,
                error=f"Internal error in '{cmd}': {exc}",
                kind="InternalError",
            )
        )

    def serve(self) -> int:
        """Serve until stdin closes; returns the number of requests seen."""

        count = 0
        with ThreadPoolExecutor(max_workers=self._workers, thread_name_prefix="bridge") as pool:
            for raw in self._stdin:
                line = raw.strip()
                if not line:
                    continue
                count += 1
                try:
                    request_id, cmd, args = _parse_request(line)
                except BadRequest as exc:
                    self._send(BridgeResponse(ok=False, error=exc.message, kind=exc.kind))
                    continue
                future = pool.submit(self._handle, request_id, cmd, args)
                future.add_done_callback(
                    lambda f, request_id=request_id, cmd=cmd: self._on_done(request_id, cmd, f)
                )

        logger.debug("bridge closed after %d requests", count)
        return count
