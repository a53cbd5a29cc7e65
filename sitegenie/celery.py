"""Celery application configuration."""
import os

from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'sitegenie.settings')

app = Celery('sitegenie')

# All CELERY_* settings in sitegenie.settings configure the app
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()
