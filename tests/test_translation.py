"""
Tests for the batch translation orchestrator.
"""

import json

import pytest
from faker import Faker

from translate_bridge.models import ProcessResult, TranslationOptions, TranslationItem
from translate_bridge.services import build_translation_service
from translate_bridge.services.translation import build_prompt, chunk
from translate_bridge.utils.errors import (
    BadRequest,
    ServiceUnavailable,
    UpstreamTimeout,
    UpstreamFailure,
    ParseFailure,
)

from conftest import FakeRunner

fake = Faker()


def make_service(runner):
    return build_translation_service({}, runner=runner)


def prompt_items(call):
    return json.loads(call['input_text'].rsplit('\n', 1)[-1])


class TestTranslateBatch:
    """Tests for TranslationService.translate_batch"""

    def test_single_item_end_to_end(self):
        runner = FakeRunner(exec_outputs=['{"results":[{"id":"p1","translatedText":"你好，世界"}]}'])
        response = make_service(runner).translate_batch({
            'items': [{'id': 'p1', 'text': 'Hello world'}],
            'targetLang': 'zh-CN',
        })

        assert response['ok'] is True
        assert response['results'] == [{'id': 'p1', 'translatedText': '你好，世界'}]
        assert response['warnings'] == []
        assert response['meta']['generated'] == 1
        assert response['meta']['cacheHits'] == 0
        assert response['meta']['total'] == 1
        assert response['meta']['model'] == 'default'

    def test_results_match_input_ids_and_order(self):
        runner = FakeRunner()
        items = [{'id': f'p{index}', 'text': fake.sentence()} for index in range(13)]
        response = make_service(runner).translate_batch({'items': items, 'batchSize': 5})

        assert [row['id'] for row in response['results']] == [item['id'] for item in items]
        assert [row['translatedText'] for row in response['results']] == [f"T:{item['text']}" for item in items]
        assert len(runner.exec_calls) == 3

    def test_chunks_preserve_order_and_size(self):
        runner = FakeRunner()
        items = [{'id': f'p{index}', 'text': f'text {index}'} for index in range(7)]
        make_service(runner).translate_batch({'items': items, 'batchSize': 3})

        batches = [[item['id'] for item in prompt_items(call)] for call in runner.exec_calls]
        assert batches == [['p0', 'p1', 'p2'], ['p3', 'p4', 'p5'], ['p6']]

    def test_resubmission_hits_cache(self):
        runner = FakeRunner()
        service = make_service(runner)
        payload = {'items': [{'id': 'p1', 'text': 'Hello'}], 'targetLang': 'ja'}

        service.translate_batch(payload)
        response = service.translate_batch(payload)

        assert response['meta']['cacheHits'] == 1
        assert response['meta']['generated'] == 0
        assert response['results'] == [{'id': 'p1', 'translatedText': 'T:Hello'}]
        assert len(runner.exec_calls) == 1

    def test_cache_is_option_aware(self):
        runner = FakeRunner()
        service = make_service(runner)

        service.translate_batch({'items': [{'id': 'p1', 'text': 'Hello'}], 'tone': 'natural'})
        response = service.translate_batch({'items': [{'id': 'p1', 'text': 'Hello'}], 'tone': 'concise'})

        assert response['meta']['cacheHits'] == 0
        assert len(runner.exec_calls) == 2

    def test_partial_cache_hit_sends_only_pending(self):
        runner = FakeRunner()
        service = make_service(runner)
        service.translate_batch({'items': [{'id': 'a', 'text': 'cached'}]})

        response = service.translate_batch({'items': [
            {'id': 'x', 'text': 'cached'},
            {'id': 'y', 'text': 'fresh'},
        ]})

        assert [item['text'] for item in prompt_items(runner.exec_calls[-1])] == ['fresh']
        assert response['results'] == [
            {'id': 'x', 'translatedText': 'T:cached'},
            {'id': 'y', 'translatedText': 'T:fresh'},
        ]
        assert response['meta']['cacheHits'] == 1
        assert response['meta']['generated'] == 1

    def test_missing_id_falls_back_with_warning(self):
        runner = FakeRunner(exec_outputs=['{"results":[{"id":"p1","translatedText":"A"}]}'])
        service = make_service(runner)
        response = service.translate_batch({'items': [
            {'id': 'p1', 'text': 'one'},
            {'id': 'p2', 'text': 'two'},
        ]})

        assert response['results'] == [
            {'id': 'p1', 'translatedText': 'A'},
            {'id': 'p2', 'translatedText': 'two'},
        ]
        assert response['warnings'] == ['Missing translation for id=p2; falling back to source text.']

    def test_fallback_text_is_not_cached(self):
        runner = FakeRunner(exec_outputs=['{"results":[{"id":"p1","translatedText":"A"}]}'])
        service = make_service(runner)
        payload = {'items': [{'id': 'p1', 'text': 'one'}, {'id': 'p2', 'text': 'two'}]}

        service.translate_batch(payload)
        response = service.translate_batch(payload)

        assert response['meta']['cacheHits'] == 1
        assert [item['id'] for item in prompt_items(runner.exec_calls[-1])] == ['p2']

    def test_foreign_ids_are_not_attributed(self):
        runner = FakeRunner(exec_outputs=['{"results":[{"id":"other","translatedText":"A"}]}'])
        response = make_service(runner).translate_batch({'items': [
            {'id': 'p1', 'text': 'one'},
            {'id': 'p2', 'text': 'two'},
        ]})

        assert response['results'] == [
            {'id': 'p1', 'translatedText': 'one'},
            {'id': 'p2', 'translatedText': 'two'},
        ]
        assert len(response['warnings']) == 2

    def test_clipped_text_is_sent_and_used_as_fallback(self):
        runner = FakeRunner(exec_outputs=['{"results":[]}', '{"results":[]}'])
        service = make_service(runner)
        long_text = 'x' * 300

        with pytest.raises(ParseFailure):
            service.translate_batch({'items': [
                {'id': 'p1', 'text': long_text},
                {'id': 'p2', 'text': 'y'},
            ], 'maxCharsPerItem': 100})

        assert prompt_items(runner.exec_calls[0])[0]['text'] == 'x' * 100 + '...'

    def test_caller_id_matching_generated_id_keeps_its_own_text(self):
        runner = FakeRunner()
        response = make_service(runner).translate_batch({'items': [
            {'text': 'alpha'},
            {'id': 'item-1', 'text': 'beta'},
        ]})

        assert response['results'] == [
            {'id': 'item-1-2', 'translatedText': 'T:alpha'},
            {'id': 'item-1', 'translatedText': 'T:beta'},
        ]

    def test_no_items_is_bad_request(self):
        runner = FakeRunner()

        with pytest.raises(BadRequest):
            make_service(runner).translate_batch({'items': [{'text': '   '}]})
        assert runner.calls == []

    def test_not_logged_in_is_unavailable_without_exec(self):
        runner = FakeRunner(logged_in=False)

        with pytest.raises(ServiceUnavailable) as excinfo:
            make_service(runner).translate_batch({'items': [{'id': 'p1', 'text': 'Hello'}]})

        assert 'codex login' in excinfo.value.message
        assert runner.exec_calls == []

    def test_not_installed_is_unavailable(self):
        runner = FakeRunner(installed=False)

        with pytest.raises(ServiceUnavailable) as excinfo:
            make_service(runner).translate_batch({'items': [{'id': 'p1', 'text': 'Hello'}]})

        assert 'not available' in excinfo.value.message
        assert runner.exec_calls == []

    def test_timeout_fails_request(self):
        runner = FakeRunner(exec_outputs=[ProcessResult(exit_code=-15, timed_out=True)])

        with pytest.raises(UpstreamTimeout):
            make_service(runner).translate_batch({'items': [{'id': 'p1', 'text': 'Hello'}]})

    def test_nonzero_exit_without_output_fails(self):
        runner = FakeRunner(exec_outputs=[
            ProcessResult(exit_code=2, stderr_text='boom\nstack line\nfinal reason'),
        ])

        with pytest.raises(UpstreamFailure) as excinfo:
            make_service(runner).translate_batch({'items': [{'id': 'p1', 'text': 'Hello'}]})

        assert 'exit 2' in excinfo.value.message
        assert 'final reason' in excinfo.value.message

    def test_nonzero_exit_with_output_still_parses(self):
        runner = FakeRunner(exec_outputs=[
            ProcessResult(exit_code=1, output_text='{"results":[{"id":"p1","translatedText":"A"}]}'),
        ])
        response = make_service(runner).translate_batch({'items': [{'id': 'p1', 'text': 'Hello'}]})

        assert response['results'] == [{'id': 'p1', 'translatedText': 'A'}]

    def test_spawn_failure_is_upstream_failure(self):
        def explode(prompt):
            raise PermissionError(13, 'Permission denied', 'codex')

        runner = FakeRunner(exec_outputs=[explode])

        with pytest.raises(UpstreamFailure):
            make_service(runner).translate_batch({'items': [{'id': 'p1', 'text': 'Hello'}]})

    def test_unparseable_multi_item_output_fails(self):
        runner = FakeRunner(exec_outputs=[ProcessResult(exit_code=0, output_text='I cannot do that', stderr_text='hint')])

        with pytest.raises(ParseFailure) as excinfo:
            make_service(runner).translate_batch({'items': [
                {'id': 'p1', 'text': 'one'},
                {'id': 'p2', 'text': 'two'},
            ]})

        assert 'I cannot do that' in excinfo.value.message
        assert 'stderr: hint' in excinfo.value.message

    def test_failed_chunk_aborts_later_chunks(self):
        runner = FakeRunner(exec_outputs=[ProcessResult(exit_code=-15, timed_out=True)])

        with pytest.raises(UpstreamTimeout):
            make_service(runner).translate_batch({
                'items': [{'id': f'p{index}', 'text': f't{index}'} for index in range(4)],
                'batchSize': 2,
            })

        assert len(runner.exec_calls) == 1

    def test_model_is_passed_and_reported(self):
        runner = FakeRunner()
        response = make_service(runner).translate_batch({
            'items': [{'id': 'p1', 'text': 'Hello'}],
            'model': ' gpt-5 ',
        })

        assert response['meta']['model'] == 'gpt-5'
        assert runner.exec_calls[0]['argv'][-3:] == ['-m', 'gpt-5', '-']


class TestTranslationOptions:
    """Tests for TranslationOptions.from_payload"""

    def test_defaults(self):
        options = TranslationOptions.from_payload({})

        assert options == TranslationOptions(
            source_lang='auto', target_lang='zh-CN', model='', mode='bilingual',
            tone='natural', batch_size=6, max_chars_per_item=1200,
        )

    def test_clamps_numbers(self):
        options = TranslationOptions.from_payload({'batchSize': 99, 'maxCharsPerItem': 5})

        assert options.batch_size == 20
        assert options.max_chars_per_item == 100

    def test_floors_fractions_and_ignores_strings(self):
        options = TranslationOptions.from_payload({'batchSize': 3.9, 'maxCharsPerItem': '800'})

        assert options.batch_size == 3
        assert options.max_chars_per_item == 1200

    def test_unknown_mode_and_tone_default(self):
        options = TranslationOptions.from_payload({'mode': 'poetry', 'tone': 'angry'})

        assert options.mode == 'bilingual'
        assert options.tone == 'natural'


class TestPrompt:
    """Tests for build_prompt and chunk"""

    def test_prompt_contents(self):
        options = TranslationOptions(source_lang='auto', target_lang='ja', tone='faithful', mode='translation-only')
        prompt = build_prompt(options, [TranslationItem(id='p1', text='Grüße')])

        assert 'from auto-detect to ja' in prompt
        assert 'Translate conservatively' in prompt
        assert 'Only output the translated text' in prompt
        assert '{"results":[{"id":"string","translatedText":"string"}]}' in prompt
        assert prompt.endswith('[{"id": "p1", "text": "Grüße"}]')

    def test_chunk(self):
        assert chunk([1, 2, 3, 4, 5], 2) == [[1, 2], [3, 4], [5]]
        assert chunk([], 3) == []
