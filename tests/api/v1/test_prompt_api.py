from promptvault import db
from promptvault.models.prompt import Prompt


def _save(client, headers, **body):
    payload = {'originalPrompt': 'raw', 'generatedPrompt': 'X', 'targetModel': 'Gemini'}
    payload.update(body)
    return client.post('/api/v1/save-prompt', json=payload, headers=headers)


class TestSavePrompt:

    def test_save_stores_row_and_returns_id(self, client, make_user):
        user, headers = make_user()

        res = _save(client, headers)

        assert res.status_code == 200
        data = res.get_json()
        assert data['success'] is True
        assert data['message'] == 'Prompt saved successfully'
        assert data['promptId']
        stored = db.session.get(Prompt, data['promptId'])
        assert stored.generated_prompt == 'X'
        assert stored.target_model == 'Gemini'
        assert stored.user_id == user.id

    def test_save_without_token_is_rejected(self, client):
        res = _save(client, {})
        assert res.status_code == 401
        assert res.get_json() == {'error': 'No authorization header'}
        assert Prompt.query.count() == 0

    def test_save_with_bad_token_is_rejected(self, client):
        res = _save(client, {'Authorization': 'Bearer not-a-token'})
        assert res.status_code == 401
        assert res.get_json() == {'error': 'Invalid or expired token'}
        assert Prompt.query.count() == 0

    def test_save_without_target_model(self, client, make_user):
        _, headers = make_user()
        res = client.post('/api/v1/save-prompt', json={'generatedPrompt': 'X'}, headers=headers)
        assert res.status_code == 400
        assert 'targetModel' in res.get_json()['error']
        assert Prompt.query.count() == 0

    def test_save_with_array_body_is_client_error(self, client, make_user):
        _, headers = make_user()
        res = client.post('/api/v1/save-prompt', json=['X', 'Gemini'], headers=headers)
        assert res.status_code == 400
        assert Prompt.query.count() == 0

    def test_save_accepts_tags_and_starred(self, client, make_user):
        _, headers = make_user()
        res = _save(client, headers, tags=['a', 'b'], starred=True)
        stored = db.session.get(Prompt, res.get_json()['promptId'])
        assert stored.tags_parsed == ['a', 'b']
        assert stored.starred is True


class TestGetPrompts:

    def test_lists_only_callers_rows(self, client, make_user):
        _, alice = make_user('alice@example.com')
        _, bob = make_user('bob@example.com')
        _save(client, alice, generatedPrompt='a1')
        _save(client, alice, generatedPrompt='a2')
        _save(client, bob, generatedPrompt='b1')

        res = client.post('/api/v1/get-prompts', json={}, headers=alice)

        assert res.status_code == 200
        data = res.get_json()
        assert data['total'] == 2
        assert sorted(p['content'] for p in data['prompts']) == ['a1', 'a2']

    def test_display_shape(self, client, make_user):
        _, headers = make_user()
        _save(client, headers, originalPrompt='my idea', generatedPrompt='better idea', targetModel='Claude')

        prompt = client.post('/api/v1/get-prompts', json={}, headers=headers).get_json()['prompts'][0]

        assert prompt['title'] == 'my idea'
        assert prompt['content'] == 'better idea'
        assert prompt['category'] == 'Claude'
        assert prompt['tags'] == ['Claude']
        assert prompt['usage_count'] == 1
        assert prompt['starred'] is False
        assert prompt['created_at'].count('/') == 2
        assert prompt['output_url'] is None

    def test_search_and_category(self, client, make_user):
        _, headers = make_user()
        _save(client, headers, generatedPrompt='has foo inside', targetModel='Gemini')
        _save(client, headers, generatedPrompt='unrelated', targetModel='Gemini')
        _save(client, headers, generatedPrompt='foo for claude', targetModel='Claude')

        by_search = client.post('/api/v1/get-prompts', json={'search': 'FOO'}, headers=headers).get_json()
        assert {p['content'] for p in by_search['prompts']} == {'has foo inside', 'foo for claude'}

        both = client.post('/api/v1/get-prompts', json={'search': 'FOO', 'category': 'Claude'},
                           headers=headers).get_json()
        assert [p['content'] for p in both['prompts']] == ['foo for claude']

        everything = client.post('/api/v1/get-prompts', json={'category': 'All'}, headers=headers).get_json()
        assert everything['total'] == 3

    def test_array_body_lists_everything(self, client, make_user):
        _, headers = make_user()
        _save(client, headers)

        res = client.post('/api/v1/get-prompts', json=['foo'], headers=headers)

        assert res.status_code == 200
        assert res.get_json()['total'] == 1

    def test_malformed_authorization_header(self, client):
        res = client.post('/api/v1/get-prompts', json={}, headers={'Authorization': 'Token abc'})
        assert res.status_code == 401
        assert res.get_json() == {'error': 'Invalid or expired token'}

    def test_list_requires_token(self, client):
        res = client.post('/api/v1/get-prompts', json={})
        assert res.status_code == 401


class TestPromptDetailAndMutations:

    def test_detail_star_and_use(self, client, make_user):
        _, headers = make_user()
        pid = _save(client, headers).get_json()['promptId']

        detail = client.get(f'/api/v1/prompts/{pid}', headers=headers)
        assert detail.status_code == 200
        assert detail.get_json()['id'] == pid

        starred = client.post(f'/api/v1/prompts/{pid}/star', headers=headers).get_json()
        assert starred['starred'] is True

        used = client.post(f'/api/v1/prompts/{pid}/use', headers=headers).get_json()
        assert used['usage_count'] == 2

        listed = client.post('/api/v1/get-prompts', json={}, headers=headers).get_json()['prompts'][0]
        assert listed['starred'] is True and listed['usage_count'] == 2

    def test_other_users_prompt_is_not_found(self, client, make_user):
        _, alice = make_user('alice@example.com')
        _, bob = make_user('bob@example.com')
        pid = _save(client, alice).get_json()['promptId']

        assert client.get(f'/api/v1/prompts/{pid}', headers=bob).status_code == 404
        assert client.post(f'/api/v1/prompts/{pid}/star', headers=bob).status_code == 404
        assert db.session.get(Prompt, pid).starred is False
