"""
Tests for the professional scheduling rule.

Two events of the same professional on the same date must not have
intersecting [start, end) intervals. Back-to-back events are allowed.
"""
from datetime import date, time
from unittest.mock import Mock, call, patch

import pytest
from rest_framework import status

from apps.core.exceptions import OverlapError, ValidationError
from apps.events.overlap import check_overlap, find_overlapping_events
from apps.events import services
from apps.events.services import combine_local

EVENTS_URL = '/api/v1/events/'
DAY = date(2025, 10, 27)


def _interval(start, end, day=DAY):
    return combine_local(day, start), combine_local(day, end)


@pytest.mark.django_db
class TestOverlapRule:

    @pytest.fixture
    def professional(self, receptor, make_professional):
        return make_professional(receptor)

    @pytest.fixture
    def booked(self, receptor, professional, make_event):
        return make_event(receptor, professional, start=time(10, 0), end=time(11, 0))

    @pytest.mark.parametrize('start,end', [
        (time(10, 30), time(11, 30)),   # starts inside
        (time(9, 30), time(10, 30)),    # ends inside
        (time(9, 0), time(12, 0)),      # contains
        (time(10, 15), time(10, 45)),   # contained
        (time(10, 0), time(11, 0)),     # identical
    ])
    def test_intersecting_interval_rejected(self, booked, professional, start, end):
        with pytest.raises(OverlapError) as exc_info:
            check_overlap(professional.id, DAY, *_interval(start, end))

        assert 'sobreposição' in exc_info.value.message

    @pytest.mark.parametrize('start,end', [
        (time(11, 0), time(12, 0)),     # starts when the other ends
        (time(9, 0), time(10, 0)),      # ends when the other starts
        (time(14, 0), time(15, 0)),
    ])
    def test_adjacent_or_disjoint_interval_allowed(self, booked, professional, start, end):
        check_overlap(professional.id, DAY, *_interval(start, end))

    def test_other_date_allowed(self, booked, professional):
        other_day = date(2025, 10, 28)
        check_overlap(professional.id, other_day, *_interval(time(10, 0), time(11, 0), other_day))

    def test_other_professional_allowed(self, booked, receptor, make_professional):
        other = make_professional(receptor, name='Dr. Carlos Lima')
        check_overlap(other.id, DAY, *_interval(time(10, 0), time(11, 0)))

    def test_event_without_professional_is_never_checked(self, booked):
        check_overlap(None, DAY, *_interval(time(10, 0), time(11, 0)))

    def test_update_excludes_the_event_itself(self, booked, professional):
        start, end = _interval(time(10, 30), time(11, 0))
        assert not find_overlapping_events(professional.id, DAY, start, end, exclude_id=booked.id).exists()
        check_overlap(professional.id, DAY, start, end, exclude_id=booked.id)

    def test_missing_time_is_a_validation_error(self, professional):
        with pytest.raises(ValidationError):
            check_overlap(professional.id, DAY, combine_local(DAY, time(10, 0)), None)

    def test_end_before_start_is_a_validation_error(self, professional):
        with pytest.raises(ValidationError):
            check_overlap(professional.id, DAY, *_interval(time(11, 0), time(10, 0)))

    def test_zero_duration_is_a_validation_error(self, professional):
        with pytest.raises(ValidationError):
            check_overlap(professional.id, DAY, *_interval(time(10, 0), time(10, 0)))


@pytest.mark.django_db
class TestOverlapThroughApi:

    @pytest.fixture
    def professional(self, receptor, make_professional):
        return make_professional(receptor)

    def _payload(self, professional, start, end, **extra):
        payload = {
            'title': 'Consulta',
            'type': 'CONSULTA',
            'date': '2025-10-27',
            'start_time': start,
            'end_time': end,
            'professional_id': str(professional.id),
        }
        payload.update(extra)
        return payload

    def test_create_overlapping_event_returns_400(self, receptor_client, professional):
        first = receptor_client.post(EVENTS_URL, self._payload(professional, '10:00', '11:00'), format='json')
        assert first.status_code == status.HTTP_201_CREATED

        second = receptor_client.post(EVENTS_URL, self._payload(professional, '10:30', '11:30'), format='json')

        assert second.status_code == status.HTTP_400_BAD_REQUEST
        assert 'sobreposição' in second.json()['error']

    def test_back_to_back_events_are_created(self, receptor_client, professional):
        first = receptor_client.post(EVENTS_URL, self._payload(professional, '10:00', '11:00'), format='json')
        second = receptor_client.post(EVENTS_URL, self._payload(professional, '11:00', '12:00'), format='json')

        assert first.status_code == status.HTTP_201_CREATED
        assert second.status_code == status.HTTP_201_CREATED
        assert second.json()['start_time'] == '11:00'
        assert second.json()['end_time'] == '12:00'

    def test_update_into_an_occupied_slot_returns_400(self, receptor_client, professional):
        receptor_client.post(EVENTS_URL, self._payload(professional, '10:00', '11:00'), format='json')
        created = receptor_client.post(EVENTS_URL, self._payload(professional, '14:00', '15:00'), format='json')

        response = receptor_client.patch(
            f"{EVENTS_URL}{created.json()['id']}/",
            {'start_time': '10:30', 'end_time': '11:30'},
            format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'sobreposição' in response.json()['error']

    def test_update_keeping_own_slot_succeeds(self, receptor_client, professional):
        created = receptor_client.post(EVENTS_URL, self._payload(professional, '10:00', '11:00'), format='json')

        response = receptor_client.patch(
            f"{EVENTS_URL}{created.json()['id']}/",
            {'end_time': '11:30', 'title': 'Retorno'},
            format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['title'] == 'Retorno'
        assert response.json()['end_time'] == '11:30'

    def test_foreign_professional_rejected(self, receptor_client, other_receptor, make_professional):
        foreign = make_professional(other_receptor)

        response = receptor_client.post(EVENTS_URL, self._payload(foreign, '10:00', '11:00'), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_end_before_start_returns_400(self, receptor_client, professional):
        response = receptor_client.post(EVENTS_URL, self._payload(professional, '11:00', '10:00'), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestProfessionalLockBeforeOverlapCheck:
    """The professional row is locked before its schedule is read."""

    @pytest.fixture
    def professional(self, receptor, make_professional):
        return make_professional(receptor)

    @pytest.fixture
    def calls(self):
        manager = Mock()
        with patch.object(services, 'get_owned_professional', wraps=services.get_owned_professional) as owned, \
                patch.object(services, 'lock_professional', wraps=services.lock_professional) as lock, \
                patch.object(services, 'check_overlap', wraps=services.check_overlap) as overlap:
            manager.attach_mock(owned, 'get_owned_professional')
            manager.attach_mock(lock, 'lock_professional')
            manager.attach_mock(overlap, 'check_overlap')
            yield manager

    @staticmethod
    def _names(manager):
        return [name for name, _, _ in manager.mock_calls]

    def test_create_locks_professional_first(self, receptor, professional, calls):
        services.create_event(receptor, {
            'title': 'Consulta',
            'type': 'CONSULTA',
            'date': DAY,
            'start_time': time(10),
            'end_time': time(11),
            'professional_id': professional.id,
        })

        assert self._names(calls) == ['get_owned_professional', 'check_overlap']
        assert calls.mock_calls[0] == call.get_owned_professional(professional.id, receptor, for_update=True)

    def test_update_locks_current_professional_first(self, receptor, professional, make_event, calls):
        event = make_event(receptor, professional)

        services.update_event(event.id, receptor, {'start_time': time(9), 'end_time': time(10)})

        assert self._names(calls) == ['lock_professional', 'check_overlap']
        assert calls.mock_calls[0] == call.lock_professional(professional.id)

    def test_update_locks_new_professional_first(self, receptor, professional, make_professional, make_event, calls):
        event = make_event(receptor, professional)
        other = make_professional(receptor, name='Dr. Paulo Lima')

        services.update_event(event.id, receptor, {'professional_id': other.id})

        assert self._names(calls) == ['get_owned_professional', 'check_overlap']
        assert calls.mock_calls[0] == call.get_owned_professional(other.id, receptor, for_update=True)
