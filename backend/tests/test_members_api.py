def _course(client, name, ctype='MAIN'):
    return client.post('/courses', json={'name': name, 'type': ctype}).json()['id']


def _member_payload(**overrides):
    payload = {'name': 'John', 'age': 20, 'group': 'A1', 'type': 'STUDENT', 'courseIds': []}
    payload.update(overrides)
    return payload


def test_member_crud_flow(client):
    math = _course(client, 'Math')
    art = _course(client, 'Art', 'SECONDARY')
    r = client.post('/members', json=_member_payload(courseIds=[art, math]))
    assert r.status_code == 201
    member = r.json()
    assert member['courseIds'] == sorted([math, art])
    mid = member['id']

    assert client.get(f'/members/{mid}').json() == member

    r2 = client.put(f'/members/{mid}', json=_member_payload(name='John B', age=21, courseIds=[art]))
    assert r2.status_code == 200
    assert r2.json()['name'] == 'John B'
    assert r2.json()['courseIds'] == [art]

    assert client.delete(f'/members/{mid}').status_code == 204
    assert client.get(f'/members/{mid}').status_code == 404
    assert client.delete(f'/members/{mid}').status_code == 404


def test_create_member_without_course_ids(client):
    payload = _member_payload()
    del payload['courseIds']
    r = client.post('/members', json=payload)
    assert r.status_code == 201
    assert r.json()['courseIds'] == []


def test_create_member_with_unknown_courses_returns_404(client):
    math = _course(client, 'Math')
    r = client.post('/members', json=_member_payload(courseIds=[math, 41, 40]))
    assert r.status_code == 404
    assert r.json() == {'error': 'Courses not found with ids: 40, 41'}
    assert client.get('/members', params={'type': 'STUDENT'}).json() == []


def test_update_missing_member_returns_404(client):
    r = client.put('/members/123', json=_member_payload())
    assert r.status_code == 404
    assert r.json() == {'error': 'Member not found with id: 123'}


def test_list_members_by_type(client):
    client.post('/members', json=_member_payload(name='John'))
    client.post('/members', json=_member_payload(name='Prof Smith', age=45, type='TEACHER'))
    r = client.get('/members', params={'type': 'TEACHER'})
    assert r.status_code == 200
    assert [m['name'] for m in r.json()] == ['Prof Smith']


def test_list_members_requires_type(client):
    r = client.get('/members')
    assert r.status_code == 400
    assert r.json()['fields'] == [{'field': 'type', 'message': 'must not be null'}]


def test_member_validation_lists_each_field(client):
    r = client.post('/members', json={'name': '', 'age': 0, 'group': ' ', 'type': 'STUDENT'})
    assert r.status_code == 400
    fields = {f['field']: f['message'] for f in r.json()['fields']}
    assert set(fields) == {'name', 'age', 'group'}
    assert fields['name'] == 'must not be blank'
    assert fields['group'] == 'must not be blank'


def test_member_age_required(client):
    payload = _member_payload()
    del payload['age']
    r = client.post('/members', json=payload)
    assert r.status_code == 400
    assert {'field': 'age', 'message': 'must not be null'} in r.json()['fields']


def test_update_member_with_unknown_courses_returns_404_and_keeps_member(client):
    math = _course(client, 'Math')
    member = client.post('/members', json=_member_payload(courseIds=[math])).json()
    r = client.put(f"/members/{member['id']}", json=_member_payload(name='Johnny', age=30, courseIds=[math, 404]))
    assert r.status_code == 404
    assert r.json() == {'error': 'Courses not found with ids: 404'}
    assert client.get(f"/members/{member['id']}").json() == member


def test_member_type_null_reads_as_required(client):
    r = client.post('/members', json=_member_payload(type=None))
    assert r.status_code == 400
    assert r.json()['fields'] == [{'field': 'type', 'message': 'must not be null'}]


def test_oversized_age_is_rejected(client):
    r = client.post('/members', json=_member_payload(age=10 ** 20))
    assert r.status_code == 400
    assert [f['field'] for f in r.json()['fields']] == ['age']
    assert client.get('/members', params={'type': 'STUDENT'}).json() == []


def test_oversized_course_id_is_rejected(client):
    r = client.post('/members', json=_member_payload(courseIds=[99999999999999999999]))
    assert r.status_code == 400
    assert r.json()['fields'][0]['field'].startswith('courseIds')


def test_oversized_member_id_in_path_is_rejected(client):
    assert client.get('/members/99999999999999999999').status_code == 400
    assert client.put('/members/99999999999999999999', json=_member_payload()).status_code == 400
    assert client.delete('/members/99999999999999999999').status_code == 400
