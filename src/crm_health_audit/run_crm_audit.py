"""
🚀 run_crm_audit.py
✅ Module: Master Audit Orchestrator
This is the main entry point for running the CRM health audit from a YAML config.

Responsibilities:
- Loads a master YAML configuration file.
- Resolves the crm_audit block (inline, or from a separate config file).
- Runs the audit pipeline and optionally prints the narrative input.
- Handles global settings like `run_id` and `notebook`.

Usage (Notebook):
-----------------
```python
from crm_health_audit.run_crm_audit import run_full_audit

result = run_full_audit(config_path="config/run_audit_config.yaml")
```
Usage (CLI / Script):
---------------------
```bash
crm-health-audit --config config/run_audit_config.yaml
```
"""

import argparse
import json
import logging

from crm_health_audit.m00_utils.audit_models import AuditResult
from crm_health_audit.m00_utils.config_loader import load_config
from crm_health_audit.m04_audit.run_audit_pipeline import run_audit_pipeline
from crm_health_audit.m05_briefing.narrative_brief import build_narrative_input

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")


def run_full_audit(config_path: str) -> AuditResult | None:
    """
    Executes the CRM audit described by a master config file.
    """
    logging.info(f"--- Loading Master Audit Config from {config_path} ---")
    master_config = load_config(config_path)

    run_id = master_config.get("run_id", "default_run")
    notebook_mode = master_config.get("notebook", False)

    module_config = master_config.get("crm_audit")
    if not module_config:
        module_path = master_config.get("config_path")
        if not module_path:
            raise ValueError("Master config needs a 'crm_audit' block or a 'config_path'.")
        module_config = load_config(module_path)

    logging.info("--- 🚀 Starting Module: CRM_AUDIT ---")
    result = run_audit_pipeline(config=module_config, notebook=notebook_mode, run_id=run_id)
    logging.info("--- ✅ Finished Module: CRM_AUDIT ---")
    return result


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run the deterministic CRM health audit.")
    parser.add_argument(
        "--config",
        type=str,
        default="config/run_audit_config.yaml",
        help="Path to the master run_audit_config.yaml file.",
    )
    parser.add_argument(
        "--print-brief",
        action="store_true",
        help="Print the narrative input built from the audit result as JSON.",
    )
    args = parser.parse_args(argv)

    result = run_full_audit(config_path=args.config)
    if result is None:
        return 0
    if args.print_brief:
        print(json.dumps(build_narrative_input(result), indent=2))
    else:
        health = result.overall_health
        print(f"Score: {health.score}/100 | Severity: {health.severity.value.upper()}")
        print(f"Primary risk driver: {health.primary_risk_driver}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
