"""
Scheduling rule: one professional cannot have intersecting events on a day.

Intervals are half-open, [start, end): two events overlap iff
start_a < end_b and end_a > start_b, so back-to-back events are allowed.
"""
from django.db.models import Q

from apps.core.exceptions import OverlapError, ValidationError
from apps.core.observability import metrics
from apps.core.observability.events import log_event_overlap_rejected
from apps.events.models import HealthEvent


def find_overlapping_events(professional_id, date, start, end, exclude_id=None):
    """
    Events of `professional_id` on `date` whose interval intersects
    [start, end), excluding `exclude_id` (the event being updated).
    """
    qs = HealthEvent.objects.filter(professional_id=professional_id, date=date)

    if exclude_id:
        qs = qs.exclude(pk=exclude_id)

    return qs.filter(Q(start_time__lt=end) & Q(end_time__gt=start))


def validate_time_range(start, end):
    """Both instants are required and end must be after start."""
    if start is None or end is None:
        raise ValidationError('Horário de início e de término são obrigatórios')
    if end <= start:
        raise ValidationError('O horário de término deve ser posterior ao horário de início')


def check_overlap(professional_id, date, start, end, exclude_id=None):
    """
    Raise OverlapError if the candidate interval collides with another
    event of the same professional on the same date.

    Events without a professional are never checked for overlap.
    """
    validate_time_range(start, end)

    if professional_id is None:
        return

    if find_overlapping_events(professional_id, date, start, end, exclude_id).exists():
        metrics.events_overlap_rejected_total.inc()
        log_event_overlap_rejected(professional_id, date, excluded_event_id=exclude_id)
        raise OverlapError()
