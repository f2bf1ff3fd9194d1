# rest.py
# REST endpoints of the demo, served by Ryu's WSGI application:
#   POST|PUT /wm/fast-failover-demo/toggle-path
#   POST|PUT /wm/fast-failover-demo/reset
#   GET      /wm/fast-failover-demo/status

import json

from ryu.app.wsgi import ControllerBase, route
from webob import Response

FAILOVER_INSTANCE_NAME = 'fast_failover_api'
BASE_PATH = '/wm/fast-failover-demo'


def json_response(payload, status=200):
    return Response(status=status,
                    content_type='application/json',
                    charset='utf-8',
                    body=json.dumps(payload, sort_keys=True).encode('utf-8'))


class FastFailoverRest(ControllerBase):

    def __init__(self, req, link, data, **config):
        super(FastFailoverRest, self).__init__(req, link, data, **config)
        self.service = data[FAILOVER_INSTANCE_NAME]

    @route('fastfailover', BASE_PATH + '/toggle-path', methods=['POST', 'PUT'])
    def toggle_path(self, req, **kwargs):
        return json_response(self.service.handle_toggle_request(req.body))

    @route('fastfailover', BASE_PATH + '/reset', methods=['POST', 'PUT'])
    def reset(self, req, **kwargs):
        return json_response(self.service.handle_reset_request(req.body))

    @route('fastfailover', BASE_PATH + '/status', methods=['GET'])
    def status(self, req, **kwargs):
        return json_response(self.service.status())
