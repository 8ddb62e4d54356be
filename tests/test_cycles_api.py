from datetime import date


def test_sync_progress(admin_client, make_cycle, make_meeting):
    cycle = make_cycle(total_meetings=6, completed_meetings=0, remaining_meetings=6)
    for status in ('completed', 'completed', 'completed', 'cancelled', 'scheduled'):
        make_meeting(cycle, status=status)

    response = admin_client.post(f'/api/cycles/{cycle.id}/sync-progress')

    assert response.status_code == 200
    assert response.get_json() == {
        'completedMeetings': 3,
        'remainingMeetings': 3,
        'totalMeetings': 6,
        'meetingsInTable': 5,
    }


def test_sync_progress_never_completes_cycle(admin_client, make_cycle, make_meeting, make_registration):
    cycle = make_cycle(total_meetings=1)
    make_registration(cycle)
    make_meeting(cycle, status='completed')

    admin_client.post(f'/api/cycles/{cycle.id}/sync-progress')

    summary = admin_client.get(f'/api/cycles/{cycle.id}/summary').get_json()
    assert summary['status'] == 'active'


def test_sync_progress_unknown_cycle(admin_client):
    assert admin_client.post('/api/cycles/404/sync-progress').status_code == 404


def test_summary(admin_client, make_instructor, make_cycle, make_meeting, make_registration):
    cycle = make_cycle(total_meetings=4)
    substitute = make_instructor(name='Substitute')
    make_registration(cycle, student_name='Noa', status='completed')
    make_registration(cycle, student_name='Omer', status='cancelled')
    make_meeting(cycle, scheduled_date=date(2026, 2, 1), status='completed',
                 revenue=500, instructor_payment=100, profit=400)
    make_meeting(cycle, scheduled_date=date(2026, 2, 8), status='completed', instructor_id=substitute.id,
                 revenue=500, instructor_payment=150, profit=350)
    make_meeting(cycle, scheduled_date=date(2026, 2, 15), status='postponed')

    body = admin_client.get(f'/api/cycles/{cycle.id}/summary').get_json()

    assert body['totalRevenue'] == 1000
    assert body['totalInstructorCost'] == 250
    assert body['totalProfit'] == 750
    assert body['studentsStarted'] == 2
    assert body['studentsFinished'] == 1
    assert body['cancellationRate'] == 50
    assert body['postponementRate'] == 25
    assert body['hadInstructorChanges'] is True


def test_instructor_cost(admin_client, make_instructor, make_cycle):
    helper = make_instructor(name='Helper', rate_frontal=100, employment_type='employee')
    cycle = make_cycle(duration_minutes=90, total_meetings=4)

    body = admin_client.get(f'/api/cycles/{cycle.id}/instructor-cost/{helper.id}').get_json()

    assert body['costPerMeeting'] == 195
    assert body['totalCost'] == 780
    assert body['instructorName'] == 'Helper'


def test_instructor_cost_unknown_instructor(admin_client, make_cycle):
    cycle = make_cycle()
    assert admin_client.get(f'/api/cycles/{cycle.id}/instructor-cost/999').status_code == 404
