import json

from webob import Request

from conftest import S3
from failover_demo.rest import FAILOVER_INSTANCE_NAME, FastFailoverRest, json_response


def _controller(service, method='POST', body=b'{"ignored": true}'):
    req = Request.blank('/wm/fast-failover-demo/toggle-path', method=method)
    req.body = body
    rest = FastFailoverRest(req, None, {FAILOVER_INSTANCE_NAME: service})
    return rest, req


def test_json_response():
    resp = json_response({'STATUS': 'SUCCESS'})
    assert resp.status_int == 200
    assert resp.content_type == 'application/json'
    assert json.loads(resp.body) == {'STATUS': 'SUCCESS'}


def test_toggle_path_route(ready_net):
    rest, req = _controller(ready_net.service)

    resp = rest.toggle_path(req)

    payload = json.loads(resp.body)
    assert payload['STATUS'] == 'SUCCESS'
    assert 'path A up and path B down' in payload['DETAILS']


def test_toggle_path_route_not_ready(net):
    rest, req = _controller(net.service, method='PUT')

    payload = json.loads(rest.toggle_path(req).body)

    assert payload['STATUS'] == 'ERROR'


def test_reset_route(ready_net):
    ready_net.disconnect(S3)
    rest, req = _controller(ready_net.service)

    payload = json.loads(rest.reset(req).body)

    assert payload['S1 STATUS'] == 'SUCCESS'
    assert payload['S3 STATUS'] == 'ERROR'


def test_status_route(ready_net):
    rest, req = _controller(ready_net.service, method='GET', body=b'')

    payload = json.loads(rest.status(req).body)

    assert payload['ready'] is True
    assert payload['live_path'] is None
    assert payload['next_path'] == 'A'
