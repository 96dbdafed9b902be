#!/usr/bin/env python3
"""
Celery worker startup script for the MCQ Surgery API
"""

from mcqprep.core.celery_app import celery_app

if __name__ == '__main__':
    celery_app.start()
