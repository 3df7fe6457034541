"""
Entry point for running the planner as a module.

Usage:
    python -m planner validate planner.json
    python -m planner conflicts planner.json
    python -m planner check planner.json C001
    python -m planner report planner.json --type tutor-schedule
"""

from planner.cli import main

if __name__ == "__main__":
    main()
