import os
import json
import time
from pathlib import Path
from contextlib import contextmanager


@contextmanager
def tracker_run(run_name: str, params: dict = None, log_dir=Path("output")):
    """Context manager for run tracking with pluggable backends.

    ``TRACKER=mlflow`` logs to MLflow (optional dependency); anything else
    writes a local JSON run log to ``log_dir/run_log.json``.

    Args:
        run_name: Name of the analysis run
        params: Dictionary of parameters to log
        log_dir: Directory for the local JSON log

    Yields:
        Dictionary with 'log' function for logging metrics
    """
    tracker = os.getenv("TRACKER", "none").lower()
    params = params or {}
    start = time.time()

    if tracker == "mlflow":
        import mlflow
        mlflow.set_tracking_uri(os.getenv("MLFLOW_TRACKING_URI", "file:./mlruns"))
        mlflow.set_experiment(os.getenv("MLFLOW_EXPERIMENT", "maternal_health"))
        with mlflow.start_run(run_name=run_name):
            for k, v in params.items():
                mlflow.log_param(k, v)

            def _log(d):
                for k, v in d.items():
                    mlflow.log_metric(k, float(v))

            yield {"log": _log}

    else:
        log_path = Path(log_dir) / "run_log.json"
        data = {"run_name": run_name, "params": params, "metrics": []}

        def _log(d):
            # numpy scalars -> native Python types
            data["metrics"].append({k: v.item() if hasattr(v, 'item') else v for k, v in d.items()})

        try:
            yield {"log": _log}
        finally:
            data["_runtime_sec"] = time.time() - start
            log_path.parent.mkdir(parents=True, exist_ok=True)
            with open(log_path, "w") as f:
                json.dump(data, f, indent=2)
