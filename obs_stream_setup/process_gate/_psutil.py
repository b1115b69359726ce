from logging import getLogger

import psutil

from .base import ProcessGate, RunningProcess, normalize_process_name

logger = getLogger(__name__)


class ProcessGatePsutil(ProcessGate):
    async def list_running(self, process_names: list[str]) -> list[RunningProcess]:
        target_names = {
            normalize_process_name(process_name) for process_name in process_names
        }

        running_processes: list[RunningProcess] = []
        for proc in psutil.process_iter(["pid", "name"]):
            try:
                name = proc.info.get("name") or ""
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                continue

            if normalize_process_name(name) not in target_names:
                continue

            running_processes.append(RunningProcess(pid=proc.info["pid"], name=name))

        logger.debug(
            f"list_running: targets={sorted(target_names)}, "
            f"found={[running_process.pid for running_process in running_processes]}"
        )

        return running_processes
