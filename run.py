#!/usr/bin/env python3
"""
CV coach - Main Entry Point

Usage:
    python run.py login <email>
    python run.py logout
    python run.py whoami
    python run.py extract <resume.pdf|resume.txt> [--quiet]
    python run.py run (--resume FILE | --resume-text TEXT|-) --jd FILE
                      [--through scored|optimized|interview]
                      [--export-dir DIR]

Global options (before the command):
    --config YAML     Load settings from a YAML profile
    --verbose, -v     Debug logging

Examples:
    # Full pipeline against the default service
    python run.py run --resume my_cv.pdf --jd job.txt

    # Score only, against a local service
    CVCOACH_SERVICE_URL=http://localhost:5678/webhook \\
        python run.py run --resume my_cv.txt --jd job.txt --through scored

    # Check what text a PDF yields before sending it
    python run.py extract my_cv.pdf
"""

from cvcoach.cli import main


if __name__ == "__main__":
    main()
