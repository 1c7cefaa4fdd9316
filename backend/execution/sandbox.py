"""
Docker sandbox utilities for running untrusted submissions
"""

import asyncio
import logging
import os
import shutil
import subprocess
import tempfile
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from .classifier import OutcomeClassifier, default_classifier, determine_outcome
from .collector import OUTPUT_LIMIT, OutputCollector
from .languages import LANGUAGE_PROFILES
from .models import ExecutionJob, ExecutionOutcome, ExecutionResult, LanguageProfile
from .watchdog import KILL_GRACE_MS, TIMEOUT_MS, Watchdog

logger = logging.getLogger(__name__)

# Docker configuration
WORKSPACE_ROOT = Path(os.getenv('JUDGE_WORKSPACE_ROOT', Path(tempfile.gettempdir()) / 'judge_jobs'))
MEMORY_LIMIT = os.getenv('JUDGE_MEMORY_LIMIT', '256m')
CPU_LIMIT = os.getenv('JUDGE_CPU_LIMIT', '0.5')
PIDS_LIMIT = os.getenv('JUDGE_PIDS_LIMIT', '64')
CONTAINER_USER = os.getenv('JUDGE_CONTAINER_USER', f'{os.getuid()}:{os.getgid()}')
MAX_CONCURRENT_SANDBOXES = int(os.getenv('JUDGE_MAX_CONCURRENT_SANDBOXES', '4'))

# Caps the number of live sandboxes across all submissions on this host
_admission = asyncio.Semaphore(MAX_CONCURRENT_SANDBOXES)

# Cache docker availability (check once per interval)
_docker_available: Optional[bool] = None
_docker_check_time: float = 0
_DOCKER_CHECK_INTERVAL = 60


class WorkspaceError(OSError):
    """Raised when a job workspace cannot be prepared"""


def create_workspace(job: ExecutionJob) -> Path:
    """
    Create the job's workspace directory and write the source file into it

    Args:
        job: The execution job owning the workspace

    Returns:
        Absolute path to the workspace

    Raises:
        WorkspaceError: If the directory or source file cannot be written
    """
    workdir = (WORKSPACE_ROOT / job.job_id).resolve()

    try:
        WORKSPACE_ROOT.mkdir(parents=True, exist_ok=True)
        # exist_ok=False: a workspace is never shared or reused
        workdir.mkdir()
    except OSError as e:
        raise WorkspaceError(f"Cannot create workspace {workdir}: {e}") from e

    try:
        (workdir / job.profile.filename).write_text(job.source, encoding='utf-8')
    except OSError as e:
        cleanup_workspace(workdir)
        raise WorkspaceError(f"Cannot write source file: {e}") from e

    return workdir


def cleanup_workspace(workdir: Path) -> None:
    """
    Remove a workspace directory; failures are logged, never raised

    Args:
        workdir: Path to the workspace
    """
    try:
        shutil.rmtree(workdir)
    except FileNotFoundError:
        pass
    except Exception as e:
        logger.warning(f"Failed to cleanup workspace {workdir}: {e}")


@contextmanager
def job_workspace(job: ExecutionJob) -> Iterator[Path]:
    """Workspace that exists exactly for the duration of the block"""
    workdir = create_workspace(job)
    try:
        yield workdir
    finally:
        cleanup_workspace(workdir)


def build_docker_command(job: ExecutionJob, workdir: Path) -> List[str]:
    """
    Build the docker invocation for one job

    Args:
        job: The execution job
        workdir: Workspace mounted as the container's working directory

    Returns:
        Argument vector for the docker CLI
    """
    return [
        'docker', 'run',
        '--name', job.container_name,
        '--rm',  # Remove container after execution
        '-i',  # Keep stdin open for the test input
        '--network', 'none',  # No network access
        '--memory', MEMORY_LIMIT,  # Memory limit
        '--memory-swap', MEMORY_LIMIT,  # No swap beyond the memory limit
        '--cpus', CPU_LIMIT,  # CPU limit
        '--pids-limit', PIDS_LIMIT,  # Process limit (fork bomb protection)
        '--security-opt', 'no-new-privileges',
        '--user', CONTAINER_USER,  # Same uid:gid as the workspace owner
        '-v', f'{workdir}:/app',
        '-w', '/app',
        job.profile.image,
        *job.profile.command,
    ]


async def remove_container(container_name: str) -> None:
    """Force-remove a container whose docker client was killed"""
    try:
        process = await asyncio.create_subprocess_exec(
            'docker', 'rm', '-f', container_name,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL
        )
        await asyncio.wait_for(process.wait(), timeout=5)
    except (OSError, asyncio.TimeoutError) as e:
        logger.warning(f"Failed to remove container {container_name}: {e}")


async def _feed_stdin(process: asyncio.subprocess.Process, data: str) -> None:
    """Write the test input, then close stdin so readers see end-of-input"""
    try:
        if data:
            process.stdin.write(data.encode('utf-8'))
            await process.stdin.drain()
    except (BrokenPipeError, ConnectionResetError):
        logger.debug(f"Process {process.pid} closed stdin before reading all input")
    finally:
        process.stdin.close()


async def _run_job(
    job: ExecutionJob,
    workdir: Path,
    timeout_ms: int,
    grace_ms: int,
    output_limit: int,
    classifier: OutcomeClassifier
) -> ExecutionResult:
    command = build_docker_command(job, workdir)

    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE
        )
    except OSError as e:
        logger.error(f"Failed to start sandbox for job {job.job_id}: {e}")
        return ExecutionResult(
            stdout='',
            stderr=f'Docker Execution Error: {e}',
            outcome=ExecutionOutcome.RUNTIME_ERROR
        )

    watchdog = Watchdog(
        timeout_ms=timeout_ms,
        grace_ms=grace_ms,
        on_force_kill=lambda: remove_container(job.container_name)
    )
    collector = OutputCollector(limit=output_limit)
    watchdog.start(process)
    collecting = asyncio.ensure_future(collector.collect(process))

    try:
        await _feed_stdin(process, job.stdin)
        await collecting
        exit_code = await process.wait()
    finally:
        watchdog.cancel()
        if process.returncode is None:
            # Orchestration failed underneath us; never leave the sandbox running
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await process.wait()
            await remove_container(job.container_name)
        collecting.cancel()
        await watchdog.wait()

    stdout, stderr = collector.result()
    outcome, stderr = determine_outcome(watchdog.killed, exit_code, stderr, job.profile, classifier)

    logger.info(f"Job {job.job_id} finished: exit={exit_code} outcome={outcome.value}")
    return ExecutionResult(stdout=stdout, stderr=stderr, outcome=outcome)


async def run_in_sandbox(
    profile: LanguageProfile,
    source: str,
    stdin: str = '',
    timeout_ms: int = TIMEOUT_MS,
    grace_ms: int = KILL_GRACE_MS,
    output_limit: int = OUTPUT_LIMIT,
    classifier: OutcomeClassifier = default_classifier
) -> ExecutionResult:
    """
    Run source code once inside an isolated container

    The workspace is removed on every exit path, including launch
    failures and exceptions raised while the sandbox is running.

    Args:
        profile: Language profile of the source
        source: Program text, written verbatim to the profile's filename
        stdin: Raw standard input for the program
        timeout_ms: Wall-clock deadline
        grace_ms: Time between terminate and kill once the deadline fires
        output_limit: Capture ceiling per stream, in characters
        classifier: Strategy separating compile from runtime failures

    Returns:
        ExecutionResult with trimmed output and the execution outcome
    """
    job = ExecutionJob(profile=profile, source=source, stdin=stdin)

    async with _admission:
        try:
            with job_workspace(job) as workdir:
                logger.info(f"Running job {job.job_id} ({profile.id}) in {workdir}")
                return await _run_job(job, workdir, timeout_ms, grace_ms, output_limit, classifier)
        except WorkspaceError as e:
            logger.error(f"Workspace setup failed for job {job.job_id}: {e}")
            return ExecutionResult(
                stdout='',
                stderr=f'System Error: {e}',
                outcome=ExecutionOutcome.RUNTIME_ERROR
            )


def is_docker_available() -> bool:
    """
    Check if Docker is available and every judge image exists.
    Results are cached to avoid repeated checks.

    Returns:
        True if Docker is available and configured
    """
    global _docker_available, _docker_check_time

    current_time = time.time()

    # Return cached result if still valid
    if _docker_available is not None and (current_time - _docker_check_time) < _DOCKER_CHECK_INTERVAL:
        return _docker_available

    try:
        # Check if Docker daemon is running
        result = subprocess.run(
            ['docker', 'info'],
            capture_output=True,
            timeout=5
        )
        if result.returncode != 0:
            _docker_available = False
            _docker_check_time = current_time
            return False

        # Check if the judge images exist
        images = sorted({profile.image for profile in LANGUAGE_PROFILES.values()})
        result = subprocess.run(
            ['docker', 'image', 'inspect', *images],
            capture_output=True,
            timeout=5
        )
        _docker_available = result.returncode == 0
        _docker_check_time = current_time
        return _docker_available

    except (OSError, subprocess.SubprocessError):
        _docker_available = False
        _docker_check_time = current_time
        return False
