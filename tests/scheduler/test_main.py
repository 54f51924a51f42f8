from scheduler.main import app, root


def test_root_reports_running() -> None:
    assert root() == {'status': 'Scheduling API Running'}


def test_core_operations_are_routed() -> None:
    paths = set(app.openapi()['paths'])

    assert {
        '/auth/me',
        '/representatives',
        '/representatives/me',
        '/availability/{representative_id}',
        '/availability/me/days/{day_of_week}',
        '/availability/{representative_id}/slots',
        '/availability/{representative_id}/day',
        '/appointments',
        '/appointments/mine',
        '/appointments/representative',
        '/appointments/{appointment_id}/status',
        '/appointments/{appointment_id}/cancel',
    } <= paths
