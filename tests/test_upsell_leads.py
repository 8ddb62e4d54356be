from db import db
from models import UpsellLead


def _lead(registration, status='new'):
    lead = UpsellLead(cycle_id=registration.cycle_id, customer_id=registration.student.customer_id,
                      student_id=registration.student_id, registration_id=registration.id,
                      completed_course='Robotics Tuesday', status=status)
    db.session.add(lead)
    db.session.commit()
    return lead


def test_list_paginates_and_filters(admin_client, make_cycle, make_registration):
    cycle = make_cycle()
    for index, status in enumerate(('new', 'new', 'contacted')):
        _lead(make_registration(cycle, student_name=f'Student {index}'), status=status)

    body = admin_client.get('/api/upsell-leads?status=new&page=1&limit=1').get_json()

    assert body['pagination'] == {'page': 1, 'limit': 1, 'total': 2, 'totalPages': 2}
    assert len(body['data']) == 1
    assert body['data'][0]['status'] == 'new'
    assert body['data'][0]['customer']['name'].startswith('Parent of')


def test_unknown_status_filter_is_ignored(admin_client, make_cycle, make_registration):
    _lead(make_registration(make_cycle()))
    body = admin_client.get('/api/upsell-leads?status=bogus').get_json()
    assert body['pagination']['total'] == 1


def test_update_status_and_notes(admin_client, make_cycle, make_registration):
    lead = _lead(make_registration(make_cycle()))

    response = admin_client.patch(f'/api/upsell-leads/{lead.id}', json={
        'status': 'contacted', 'notes': 'Called the parent',
    })

    assert response.status_code == 200
    assert response.get_json()['status'] == 'contacted'
    assert response.get_json()['notes'] == 'Called the parent'


def test_update_rejects_unknown_status(admin_client, make_cycle, make_registration):
    lead = _lead(make_registration(make_cycle()))
    response = admin_client.patch(f'/api/upsell-leads/{lead.id}', json={'status': 'won'})
    assert response.status_code == 400


def test_update_unknown_lead(admin_client):
    assert admin_client.patch('/api/upsell-leads/77', json={'notes': 'x'}).status_code == 404


def test_leads_cannot_be_created_directly(admin_client):
    assert admin_client.post('/api/upsell-leads', json={}).status_code == 405


def test_leads_need_finance_role(instructor_client):
    assert instructor_client.get('/api/upsell-leads').status_code == 403
