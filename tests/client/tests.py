import asyncio
import logging

import pytest

import badger
from badger.base import Accepted, Client
from badger.conf import Config
from badger.exceptions import (
    BuildError, NotifyError, NotProcessed, RateExceeded, Redirected,
    Rejected, ServerError, Timeout, TransportFailure, Unauthorized,
    UnknownStatus)
from badger.transport.aiohttp import AIOHTTPTransport
from badger.transport.base import Response
from badger.utils.testutils import InMemoryTransport


async def raise_and_notify(client, **kwargs):
    try:
        raise ValueError('boom')
    except ValueError:
        return await client.notify(**kwargs)


class TestClient(object):
    def test_default_transport(self, config):
        client = Client(config)
        assert isinstance(client.transport, AIOHTTPTransport)
        assert client.transport.timeout == config.timeout

    def test_headers(self, config):
        headers = Client(config, transport=InMemoryTransport()).get_headers()
        assert headers['X-API-Key'] == 'dummy-api-key'
        assert headers['Content-Type'] == 'application/json'
        assert headers['Accept'] == 'application/json'
        assert headers['User-Agent'].startswith(
            'badger-python/%s; ' % badger.VERSION)

    def test_build_notice_without_exception(self, config):
        client = Client(config, transport=InMemoryTransport())
        with pytest.raises(BuildError):
            client.build_notice()

    def test_build_notice_uses_max_causes(self):
        config = Config('dummy-api-key', max_causes=1)
        client = Client(config, transport=InMemoryTransport())
        try:
            try:
                try:
                    raise ValueError()
                except ValueError:
                    raise KeyError()
            except KeyError:
                raise TypeError()
        except TypeError as exc:
            notice = client.build_notice(exc)
        assert [c['class'] for c in notice.error['causes']] == ['KeyError']


class TestNotify(object):
    @pytest.mark.asyncio
    async def test_accepted(self, config, transport):
        client = Client(config, transport=transport)
        outcome = await client.notify(ValueError('boom'), context={'user_id': '42'})

        assert outcome == Accepted(201, 'abc')
        assert len(transport.sent) == 1
        url, data, headers = transport.sent[0]
        assert url == 'https://api.example.com/v1/notices'
        assert headers['X-API-Key'] == 'dummy-api-key'
        event = transport.events[0]
        assert event['error']['class'] == 'ValueError'
        assert event['request']['context'] == {'user_id': '42'}

    @pytest.mark.asyncio
    async def test_notify_current_exception(self, config, transport):
        client = Client(config, transport=transport)
        await raise_and_notify(client)
        event = transport.events[0]
        assert event['error']['message'] == 'boom'
        assert event['error']['backtrace'][0]['method'] == 'raise_and_notify'
        assert 'request' not in event

    @pytest.mark.asyncio
    async def test_accepted_without_id(self, config):
        transport = InMemoryTransport(Response(200, {}, ''))
        outcome = await Client(config, transport=transport).notify('oops')
        assert outcome.status == 200
        assert outcome.id is None

    @pytest.mark.asyncio
    async def test_accepted_with_non_json_body(self, config):
        transport = InMemoryTransport(Response(200, {}, 'OK'))
        outcome = await Client(config, transport=transport).notify('oops')
        assert outcome.id is None

    @pytest.mark.asyncio
    async def test_empty_api_key_sends_nothing(self, transport):
        client = Client(Config(''), transport=transport)
        with pytest.raises(BuildError):
            await client.notify(ValueError('boom'))
        assert transport.sent == []

    @pytest.mark.asyncio
    async def test_transport_errors_propagate(self, config):
        failure = TransportFailure('connection refused')
        client = Client(config, transport=InMemoryTransport(failure))
        with pytest.raises(TransportFailure) as excinfo:
            await client.notify('oops')
        assert excinfo.value is failure

    @pytest.mark.asyncio
    async def test_slow_transport_times_out(self):
        transport = InMemoryTransport(delay=2)
        client = Client(Config('key', timeout=0.01), transport=transport)
        with pytest.raises(Timeout) as excinfo:
            await client.notify('oops')
        assert excinfo.value.timeout == 0.01
        assert not isinstance(excinfo.value, TransportFailure)
        assert len(transport.sent) == 1

    @pytest.mark.asyncio
    async def test_cancellation(self, config):
        transport = InMemoryTransport(delay=10)
        client = Client(config, transport=transport)
        task = asyncio.ensure_future(client.notify('oops'))
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert len(transport.sent) == 1

    @pytest.mark.asyncio
    async def test_concurrent_notifies(self, config, transport):
        client = Client(config, transport=transport)
        outcomes = await asyncio.gather(*[
            client.notify('error %d' % i, context={'i': i}) for i in range(5)
        ])
        assert all(isinstance(o, Accepted) for o in outcomes)
        contexts = sorted(e['request']['context']['i'] for e in transport.events)
        assert contexts == [0, 1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_context_manager_closes_transport(self, config, transport):
        async with Client(config, transport=transport) as client:
            await client.notify('oops')
        assert transport.closed


class TestHandleResponse(object):
    @pytest.fixture
    def client(self, config, transport):
        return Client(config, transport=transport)

    def test_success(self, client):
        outcome = client.handle_response(Response(200, {}, '{"id":"abc"}'))
        assert isinstance(outcome, Accepted)
        assert outcome.id == 'abc'

    def test_rejected_keeps_body(self, client):
        body = '{"error":"Invalid payload"}'
        with pytest.raises(Rejected) as excinfo:
            client.handle_response(Response(422, {}, body))
        error = excinfo.value
        assert isinstance(error, NotProcessed)
        assert error.status == 422
        assert error.body == body
        assert error.message == 'Invalid payload'

    def test_unauthorized(self, client):
        with pytest.raises(Unauthorized) as excinfo:
            client.handle_response(Response(401, {}, ''))
        assert excinfo.value.status == 401
        assert isinstance(excinfo.value, Rejected)
        assert 'API key' in str(excinfo.value)

    def test_rate_exceeded(self, client):
        with pytest.raises(RateExceeded) as excinfo:
            client.handle_response(Response(429, {'Retry-After': '30'}, ''))
        assert excinfo.value.retry_after == 30
        assert isinstance(excinfo.value, Rejected)

    def test_rate_exceeded_bad_retry_after(self, client):
        with pytest.raises(RateExceeded) as excinfo:
            client.handle_response(Response(429, {'Retry-After': 'soon'}, ''))
        assert excinfo.value.retry_after == 0

    def test_other_client_error(self, client):
        with pytest.raises(Rejected) as excinfo:
            client.handle_response(Response(404, {}, 'Not Found'))
        assert type(excinfo.value) is Rejected
        assert excinfo.value.body == 'Not Found'

    def test_server_error(self, client):
        with pytest.raises(ServerError) as excinfo:
            client.handle_response(Response(503, {}, 'unavailable'))
        assert isinstance(excinfo.value, TransportFailure)
        assert excinfo.value.status == 503

    def test_redirect(self, client):
        headers = {'Location': 'https://elsewhere.example.com/v1/notices'}
        with pytest.raises(Redirected) as excinfo:
            client.handle_response(Response(301, headers, ''))
        assert excinfo.value.location == headers['Location']
        assert not isinstance(excinfo.value, (Rejected, TransportFailure))

    def test_unknown_status(self, client):
        with pytest.raises(UnknownStatus) as excinfo:
            client.handle_response(Response(102, {}, ''))
        assert excinfo.value.status == 102

    def test_timeout_is_not_transport_failure(self):
        assert not issubclass(Timeout, TransportFailure)
        assert issubclass(Timeout, NotifyError)


class TestNotifyNowait(object):
    @pytest.mark.asyncio
    async def test_delivers_in_background(self, config, transport):
        client = Client(config, transport=transport)
        task = client.notify_nowait('oops', context={'user_id': '42'})
        await client.flush()
        assert task.done()
        assert task.result() == Accepted(201, 'abc')
        assert transport.events[0]['request']['context'] == {'user_id': '42'}
        assert not client._pending

    @pytest.mark.asyncio
    async def test_captures_exception_at_call_time(self, config, transport):
        client = Client(config, transport=transport)
        try:
            raise ValueError('boom')
        except ValueError:
            client.notify_nowait()
        await client.flush()
        assert transport.events[0]['error']['class'] == 'ValueError'

    @pytest.mark.asyncio
    async def test_build_error_is_raised_immediately(self, transport):
        client = Client(Config(''), transport=transport)
        with pytest.raises(BuildError):
            client.notify_nowait('oops')
        assert not client._pending

    @pytest.mark.asyncio
    async def test_failures_are_logged(self, config, caplog):
        transport = InMemoryTransport(Response(422, {}, '{"error":"bad"}'))
        client = Client(config, transport=transport)
        with caplog.at_level(logging.ERROR, logger='honeybadger.errors'):
            client.notify_nowait('oops')
            await client.flush()
        assert 'Unable to deliver notice to Honeybadger' in caplog.text
        assert 'https://api.example.com/v1/notices' in caplog.text
