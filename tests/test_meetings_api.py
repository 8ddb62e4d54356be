from datetime import date


def test_requires_login(client, make_cycle, make_meeting):
    meeting = make_meeting(make_cycle())
    response = client.patch(f'/api/meetings/{meeting.id}/status', json={'status': 'completed'})
    assert response.status_code == 401


def test_requires_finance_role(instructor_client, make_cycle, make_meeting):
    meeting = make_meeting(make_cycle())
    response = instructor_client.patch(f'/api/meetings/{meeting.id}/status', json={'status': 'completed'})
    assert response.status_code == 403


def test_complete_meeting(admin_client, make_cycle, make_meeting):
    meeting = make_meeting(make_cycle(total_meetings=4))

    response = admin_client.patch(f'/api/meetings/{meeting.id}/status', json={'status': 'completed'})

    assert response.status_code == 200
    body = response.get_json()
    assert body['meeting']['status'] == 'completed'
    assert body['financials']['revenue'] == 500
    assert body['financials']['adjustedProfit'] == 400
    assert body['completion']['completedMeetings'] == 1
    assert body['completionError'] is None


def test_invalid_status(admin_client, make_cycle, make_meeting):
    meeting = make_meeting(make_cycle())
    response = admin_client.patch(f'/api/meetings/{meeting.id}/status', json={'status': 'done'})
    assert response.status_code == 400
    assert response.get_json()['error']['code'] == 'validation_error'


def test_unknown_meeting(admin_client):
    response = admin_client.patch('/api/meetings/999/status', json={'status': 'completed'})
    assert response.status_code == 404
    assert response.get_json()['error']['code'] == 'not_found'


def test_bulk_update_groups_completions_by_cycle(admin_client, make_cycle, make_meeting, make_registration):
    cycle = make_cycle(total_meetings=2)
    make_registration(cycle)
    first = make_meeting(cycle, scheduled_date=date(2026, 5, 3))
    second = make_meeting(cycle, scheduled_date=date(2026, 5, 10))
    make_meeting(cycle, scheduled_date=date(2026, 5, 17))

    response = admin_client.post('/api/meetings/bulk-update-status', json={
        'ids': [first.id, second.id, 999], 'status': 'completed',
    })

    assert response.status_code == 200
    body = response.get_json()
    assert body['updated'] == 2
    assert body['errors'] == [{'id': 999, 'error': 'Meeting 999 not found'}]
    assert len(body['completions']) == 1
    completion = body['completions'][0]
    assert completion['cycleCompleted'] is True
    assert completion['leadsCreated'] == 1
    assert completion['meetingsDeleted'] == 1


def test_bulk_update_collects_calculation_errors(admin_client, make_cycle, make_meeting):
    cycle = make_cycle(total_meetings=5)
    good = make_meeting(cycle)
    bad = make_meeting(make_cycle(type='barter', total_meetings=5))

    body = admin_client.post('/api/meetings/bulk-update-status', json={
        'ids': [good.id, bad.id], 'status': 'completed',
    }).get_json()

    assert body['updated'] == 1
    assert body['errors'][0]['id'] == bad.id
    assert len(body['completions']) == 1
    assert body['completions'][0]['cycleId'] == cycle.id
    assert body['completions'][0]['completedMeetings'] == 1



def test_bulk_update_needs_ids(admin_client):
    response = admin_client.post('/api/meetings/bulk-update-status', json={'status': 'completed'})
    assert response.status_code == 400


def test_recalculate(admin_client, make_cycle, make_meeting):
    cycle = make_cycle(total_meetings=5)
    scheduled = make_meeting(cycle)
    completed = make_meeting(cycle, status='completed', revenue=1, instructor_payment=1, profit=0)

    assert admin_client.post(f'/api/meetings/{scheduled.id}/recalculate').status_code == 400

    body = admin_client.post(f'/api/meetings/{completed.id}/recalculate').get_json()
    assert body['skipped'] is True
    assert body['meeting']['revenue'] == 1

    body = admin_client.post(f'/api/meetings/{completed.id}/recalculate?force=true').get_json()
    assert body['skipped'] is False
    assert body['meeting']['revenue'] == 500


def test_bulk_recalculate(admin_client, make_cycle, make_meeting):
    cycle = make_cycle(total_meetings=5)
    fresh = make_meeting(cycle, status='completed')
    stored = make_meeting(cycle, status='completed', revenue=500, instructor_payment=100, profit=400)
    scheduled = make_meeting(cycle)

    body = admin_client.post('/api/meetings/bulk-recalculate', json={
        'ids': [fresh.id, stored.id, scheduled.id],
    }).get_json()

    assert body['updated'] == 1
    assert body['skipped'] == 1
    assert [e['id'] for e in body['errors']] == [scheduled.id]


def test_meeting_financials(admin_client, make_cycle, make_meeting, make_meeting_expense):
    cycle = make_cycle(total_meetings=4)
    meeting = make_meeting(cycle)
    make_meeting_expense(meeting, amount=40, status='approved')
    admin_client.patch(f'/api/meetings/{meeting.id}/status', json={'status': 'completed'})

    body = admin_client.get(f'/api/meetings/{meeting.id}/financials').get_json()

    assert body['profit'] == 400
    assert body['meetingExpenses'] == 40
    assert body['cycleExpenseShare'] == 0
    assert body['adjustedProfit'] == 360


def test_financials_of_uncomputed_meeting(instructor_client, make_cycle, make_meeting):
    meeting = make_meeting(make_cycle())
    body = instructor_client.get(f'/api/meetings/{meeting.id}/financials').get_json()
    assert body['revenue'] is None
    assert body['adjustedProfit'] is None
