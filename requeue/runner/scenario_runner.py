"""Scenario runner driving a coordinator with concurrent failing requests."""

import asyncio
import time
import uuid
from datetime import datetime
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from requeue.coordination import RetryCoordinator
from requeue.core.exceptions import (
    QueueProcessingError,
    RefreshError,
    RequestFailedError,
    ScenarioError,
)
from requeue.core.models import (
    RequestDescriptor,
    RequestResult,
    ScenarioConfig,
    ScenarioRun,
)
from requeue.core.types import RequestOutcome, ScenarioStatus

from .simulated_api import (
    SimulatedApi,
    SimulatedTokenEndpoint,
    SimulatedTokenStrategy,
    bearer_token,
)


class ScenarioRunner:
    """Run a concurrent failure scenario against a simulated API."""

    def __init__(self, config: ScenarioConfig, console: Optional[Console] = None):
        """Initialize scenario runner.

        Args:
            config: Scenario definition
            console: Console for progress and summary output
        """
        self.config = config
        self.console = console or Console()

        self.endpoint = SimulatedTokenEndpoint(
            token=config.refreshed_token,
            delay=config.refresh_delay,
            outcome=config.refresh_outcome,
        )
        self.api = SimulatedApi(
            valid_token=config.refreshed_token,
            server_error_urls=[
                self._url(i) for i in range(min(config.passthrough_requests, config.requests))
            ],
        )
        self.strategy = SimulatedTokenStrategy(
            self.api,
            self.endpoint,
            tag=config.tag,
            timeout=config.refresh_timeout,
        )
        self.coordinator = RetryCoordinator(self.strategy)

    async def run(self) -> ScenarioRun:
        """Execute scenario.

        Returns:
            ScenarioRun with per-request results and metrics

        Raises:
            ScenarioError: If the scenario cannot be executed
        """
        run = ScenarioRun(
            run_id=str(uuid.uuid4()),
            scenario_name=self.config.name,
            scenario_version=self.config.version,
            status=ScenarioStatus.RUNNING,
            started_at=datetime.now(),
        )
        start = time.time()

        try:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                TimeElapsedColumn(),
                console=self.console,
            ) as progress:
                # Wave 1: concurrent failures
                task_wave = progress.add_task(
                    f"[cyan]Sending {self.config.requests} requests...",
                    total=self.config.requests,
                )
                run.results.extend(
                    await self._send_wave(0, self.config.requests, self.config.stagger)
                )
                progress.update(task_wave, completed=self.config.requests)

                # Wave 2: failures after the first refresh cycle settled
                if self.config.late_requests:
                    task_late = progress.add_task(
                        f"[yellow]Sending {self.config.late_requests} late requests...",
                        total=self.config.late_requests,
                    )
                    run.results.extend(
                        await self._send_wave(
                            self.config.requests, self.config.late_requests, 0.0
                        )
                    )
                    progress.update(task_late, completed=self.config.late_requests)

        except Exception as e:
            run.status = ScenarioStatus.FAILED
            run.error_message = str(e)
            run.completed_at = datetime.now()
            self.console.print(f"[red]Scenario failed: {escape(str(e))}[/red]")
            raise ScenarioError(f"Scenario execution failed: {e}")

        self._record_metrics(run, time.time() - start)
        run.completed_at = datetime.now()

        self._print_summary(run)
        return run

    async def _send_wave(self, offset: int, count: int, stagger: float) -> List[RequestResult]:
        """Send count requests concurrently, stagger seconds apart."""

        async def delayed(index: int) -> RequestResult:
            if stagger:
                await asyncio.sleep(stagger * (index - offset))
            return await self._send_one(index)

        return list(await asyncio.gather(*(delayed(i) for i in range(offset, offset + count))))

    async def _send_one(self, index: int) -> RequestResult:
        """Send one request through the coordinator and classify its outcome."""
        request = RequestDescriptor(
            url=self._url(index),
            headers={"Authorization": f"Bearer {self.config.stale_token}"},
        )
        request_id = f"req-{index + 1}"

        try:
            response = await self.coordinator.call(self.api.send, request)
        except RequestFailedError as e:
            outcome = (
                RequestOutcome.RETRY_FAILED
                if self.coordinator.has_been_retried(request)
                else RequestOutcome.PASSTHROUGH
            )
            return RequestResult(request_id=request_id, outcome=outcome, error=str(e))
        except (RefreshError, QueueProcessingError) as e:
            return RequestResult(
                request_id=request_id,
                outcome=RequestOutcome.REFRESH_FAILED,
                error=str(e),
            )

        outcome = (
            RequestOutcome.RETRIED
            if self.coordinator.has_been_retried(request)
            else RequestOutcome.SUCCEEDED
        )
        return RequestResult(
            request_id=request_id, outcome=outcome, token=bearer_token(request) or response.token
        )

    def _record_metrics(self, run: ScenarioRun, elapsed: float) -> None:
        """Aggregate results into run metrics and status."""
        outcomes = [r.outcome for r in run.results]
        metrics = run.metrics
        metrics.total_requests = len(outcomes)
        metrics.succeeded_requests = outcomes.count(RequestOutcome.SUCCEEDED)
        metrics.retried_requests = outcomes.count(RequestOutcome.RETRIED)
        metrics.passthrough_requests = outcomes.count(RequestOutcome.PASSTHROUGH)
        metrics.failed_requests = outcomes.count(
            RequestOutcome.REFRESH_FAILED
        ) + outcomes.count(RequestOutcome.RETRY_FAILED)
        metrics.refresh_cycles = self.coordinator.stats.refresh_cycles
        metrics.total_time = elapsed

        ok = metrics.succeeded_requests + metrics.retried_requests
        if ok == metrics.total_requests:
            run.status = ScenarioStatus.COMPLETED
        elif ok == 0:
            run.status = ScenarioStatus.FAILED
            run.error_message = f"All {metrics.total_requests} requests failed"
        else:
            run.status = ScenarioStatus.PARTIAL

    def _url(self, index: int) -> str:
        return f"/resource/{index + 1}"

    def _print_summary(self, run: ScenarioRun) -> None:
        """Print execution summary."""
        self.console.print("\n[bold]Scenario Execution Summary[/bold]")
        self.console.print(f"Run ID: {run.run_id}")
        self.console.print(f"Scenario: {run.scenario_name} v{run.scenario_version}")
        self.console.print(f"Status: {run.status.value}")

        table = Table(title="Requests")
        table.add_column("Request")
        table.add_column("Outcome")
        table.add_column("Token")
        table.add_column("Error")
        for result in run.results:
            table.add_row(
                result.request_id,
                result.outcome.value,
                result.token or "-",
                result.error or "-",
            )
        self.console.print(table)

        self.console.print("\n[bold]Metrics:[/bold]")
        self.console.print(f"  Total Requests: {run.metrics.total_requests}")
        self.console.print(f"  Succeeded: {run.metrics.succeeded_requests}")
        self.console.print(f"  Retried: {run.metrics.retried_requests}")
        self.console.print(f"  Passthrough: {run.metrics.passthrough_requests}")
        self.console.print(f"  Failed: {run.metrics.failed_requests}")
        self.console.print(f"  Refresh Cycles: {run.metrics.refresh_cycles}")
        self.console.print(f"  Total: {run.metrics.total_time:.2f}s")
