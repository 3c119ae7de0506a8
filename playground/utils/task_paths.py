from pathlib import Path
from typing import Optional


class TaskPaths:
    """
    Log path layout for the playground entry points.

    - Global logs: logs/<name>.log
    - Per-session logs: logs/sessions/<session_id>/<name>.log
    """

    def __init__(self, logs_root: str = "logs", base_dir: Optional[Path] = None):
        """
        Args:
            logs_root: Base logs directory name (default: "logs")
            base_dir: Directory the logs root is resolved against
                (default: current working directory)
        """
        if base_dir:
            self.logs_root = Path(base_dir) / logs_root
        else:
            self.logs_root = Path(logs_root)

    def get_log_path(self, run_id: str | None = None, name: str = "playground") -> str:
        """
        Get the log file path, creating its directory.

        Args:
            run_id: Optional session identifier for per-session logging
            name: Log file name (without .log extension)

        Returns:
            Full path to log file as string
        """
        if run_id:
            p = self.logs_root / "sessions" / run_id / f"{name}.log"
        else:
            p = self.logs_root / f"{name}.log"
        p.parent.mkdir(parents=True, exist_ok=True)
        return str(p)
