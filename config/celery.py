# config/celery.py
import os
from celery import Celery

# Production settings unless the environment says otherwise.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.production")

app = Celery("question_bank")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
