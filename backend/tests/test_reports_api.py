import pytest


@pytest.fixture()
def seeded(client):
    math = client.post('/courses', json={'name': 'Math', 'type': 'MAIN'}).json()['id']
    art = client.post('/courses', json={'name': 'Art', 'type': 'SECONDARY'}).json()['id']
    john = client.post('/members', json={'name': 'John', 'age': 20, 'group': 'A1', 'type': 'STUDENT', 'courseIds': [math]}).json()
    smith = client.post('/members', json={'name': 'Prof Smith', 'age': 45, 'group': 'A1', 'type': 'TEACHER', 'courseIds': [math]}).json()
    return {'math': math, 'art': art, 'john': john, 'smith': smith}


def test_counts(client, seeded):
    assert client.get('/reports/members/count', params={'type': 'STUDENT'}).json() == {'count': 1}
    assert client.get('/reports/members/count', params={'type': 'TEACHER'}).json() == {'count': 1}
    assert client.get('/reports/courses/count', params={'type': 'MAIN'}).json() == {'count': 1}
    assert client.get('/reports/courses/count', params={'type': 'SECONDARY'}).json() == {'count': 1}


def test_count_rejects_unknown_type(client):
    r = client.get('/reports/courses/count', params={'type': 'OTHER'})
    assert r.status_code == 400


def test_members_in_course(client, seeded):
    r = client.get('/reports/courses/members', params={'courseId': seeded['math'], 'type': 'TEACHER'})
    assert r.status_code == 200
    assert [m['name'] for m in r.json()] == ['Prof Smith']


def test_members_in_unknown_course(client, seeded):
    r = client.get('/reports/courses/members', params={'courseId': 999, 'type': 'STUDENT'})
    assert r.status_code == 404


def test_members_in_group(client, seeded):
    r = client.get('/reports/groups/members', params={'group': 'A1'})
    assert r.status_code == 200
    assert [m['name'] for m in r.json()] == ['John', 'Prof Smith']


def test_group_course_report(client, seeded):
    r = client.get('/reports/groups/courses', params={'group': 'A1', 'courseId': seeded['math']})
    assert r.status_code == 200
    body = r.json()
    assert body['group'] == 'A1'
    assert body['courseId'] == seeded['math']
    assert body['members'] == [seeded['john'], seeded['smith']]


def test_group_course_report_empty(client, seeded):
    r = client.get('/reports/groups/courses', params={'group': 'A1', 'courseId': seeded['art']})
    assert r.status_code == 200
    assert r.json()['members'] == []


def test_group_course_report_unknown_course(client, seeded):
    r = client.get('/reports/groups/courses', params={'group': 'A1', 'courseId': 999})
    assert r.status_code == 404


def test_filter_by_age_is_inclusive(client, seeded):
    client.post('/members', json={'name': 'Jane', 'age': 22, 'group': 'B1', 'type': 'STUDENT', 'courseIds': [seeded['math']]})
    r = client.get('/reports/members/filter', params={'minAge': 20, 'courseId': seeded['math'], 'type': 'STUDENT'})
    assert [m['name'] for m in r.json()] == ['John', 'Jane']
    r2 = client.get('/reports/members/filter', params={'minAge': 21, 'courseId': seeded['math'], 'type': 'STUDENT'})
    assert [m['name'] for m in r2.json()] == ['Jane']


def test_filter_unknown_course(client, seeded):
    r = client.get('/reports/members/filter', params={'minAge': 1, 'courseId': 999, 'type': 'STUDENT'})
    assert r.status_code == 404


@pytest.mark.parametrize('path, params', [
    ('/reports/courses/members', {'courseId': 99999999999999999999, 'type': 'STUDENT'}),
    ('/reports/groups/courses', {'group': 'A1', 'courseId': 99999999999999999999}),
    ('/reports/members/filter', {'minAge': 1, 'courseId': 99999999999999999999, 'type': 'STUDENT'}),
    ('/reports/members/filter', {'minAge': 10 ** 20, 'courseId': 1, 'type': 'STUDENT'}),
])
def test_oversized_report_params_are_rejected(client, path, params):
    r = client.get(path, params=params)
    assert r.status_code == 400
    assert r.json()['error'] == 'Validation failed'
