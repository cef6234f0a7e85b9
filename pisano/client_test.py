import logging
import os
import unittest
from unittest.mock import MagicMock, patch

import requests

from pisano import client as pisano_client

# Disable logging for tests
logging.disable(logging.CRITICAL)


def mock_response(payload=None, status_code=200):
  response = MagicMock()
  response.status_code = status_code
  response.ok = 200 <= status_code < 300
  response.content = b'{}' if payload is not None else b''
  response.json.return_value = payload
  response.text = str(payload)
  return response


class PisanoClientInitTest(unittest.TestCase):

  def test_init_with_token(self):
    """Tests that the environment selects the API url."""
    client = pisano_client.PisanoClient(token='secret', environment='prodeu')
    self.assertEqual(client.base_url, 'https://api.pisano.co')
    self.assertEqual(client.token, 'secret')

  @patch.dict(
      os.environ, {'PISANO_TOKEN': 'env-token', 'PISANO_ENVIRONMENT': 'stage'}
  )
  def test_init_from_environment(self):
    client = pisano_client.PisanoClient()
    self.assertEqual(client.token, 'env-token')
    self.assertEqual(client.base_url, 'https://api.stage.psn.cx')

  @patch.dict(os.environ, {}, clear=True)
  def test_init_defaults_to_try(self):
    client = pisano_client.PisanoClient(token='secret')
    self.assertEqual(client.base_url, 'https://api.try.psn.cx')

  @patch.dict(os.environ, {}, clear=True)
  def test_init_without_token(self):
    with self.assertRaises(ValueError):
      pisano_client.PisanoClient()
    with self.assertRaises(ValueError):
      pisano_client.PisanoClient(token='   ')

  def test_init_unknown_environment(self):
    with self.assertRaises(ValueError):
      pisano_client.PisanoClient(token='secret', environment='nowhere')

  def test_base_url_override(self):
    client = pisano_client.PisanoClient(
        token='secret', environment='nowhere', base_url='http://localhost/'
    )
    self.assertEqual(client.base_url, 'http://localhost')


class PisanoClientCallsTest(unittest.TestCase):

  def setUp(self):
    self.session = MagicMock()
    self.client = pisano_client.PisanoClient(
        token='secret', environment='try', session=self.session
    )

  def _call_args(self):
    args, kwargs = self.session.request.call_args
    return args, kwargs

  def test_complete_login(self):
    account = {'account': {'id': 7, 'name': 'Acme'}, 'node': {'id': 9}}
    self.session.request.return_value = mock_response(account)

    self.assertEqual(self.client.complete_login(), account)
    args, kwargs = self._call_args()
    self.assertEqual(args, ('POST', 'https://api.try.psn.cx/v1/complete_login'))
    self.assertEqual(kwargs['params'], {'token': 'secret'})

  def test_complete_login_without_ids(self):
    """Tests that a login response missing account or node ids is rejected."""
    for account in (
        {'node': {'id': 9}},
        {'account': {'name': 'Acme'}, 'node': {'id': 9}},
        {'account': {'id': 7}, 'node': None},
        {},
        [],
    ):
      self.session.request.return_value = mock_response(account)
      with self.assertRaises(pisano_client.PisanoApiError):
        self.client.complete_login()

  def test_complete_login_with_zero_ids(self):
    account = {'account': {'id': 0}, 'node': {'id': 0}}
    self.session.request.return_value = mock_response(account)
    self.assertEqual(self.client.complete_login(), account)

  def test_fetch_language_catalog(self):
    """Tests that the language list becomes a code to id mapping."""
    self.session.request.return_value = mock_response([
        {'id': 1, 'code': 'EN', 'name': 'English'},
        {'id': 2, 'code': 'TR', 'name': 'Turkish'},
        {'id': 3, 'name': 'No code'},
    ])

    self.assertEqual(
        self.client.fetch_language_catalog(), {'EN': 1, 'TR': 2}
    )
    args, kwargs = self._call_args()
    self.assertEqual(args, ('GET', 'https://api.try.psn.cx/v1/languages'))
    self.assertEqual(
        kwargs['headers']['authorization'], 'Token token="secret"'
    )

  def test_create_flow(self):
    flow = {'name': 'Flow', 'states': []}
    self.session.request.return_value = mock_response({'id': 'flow-1'})

    self.assertEqual(self.client.create_flow(flow, 9), {'id': 'flow-1'})
    args, kwargs = self._call_args()
    self.assertEqual(args, ('POST', 'https://api.try.psn.cx/v1/flows'))
    self.assertEqual(kwargs['params'], {'node_id': 9})
    self.assertEqual(kwargs['headers'], {'Authorization': 'Bearer secret'})
    self.assertEqual(kwargs['json'], flow)

  def test_create_link_campaign(self):
    self.session.request.return_value = mock_response({'id': 'channel-1'})

    self.client.create_link_campaign('Spring  Survey 2025', 9)
    args, kwargs = self._call_args()
    self.assertEqual(
        args, ('POST', 'https://api.try.psn.cx/v1/link_campaigns')
    )
    body = kwargs['json']
    self.assertEqual(body['name'], 'Spring  Survey 2025')
    self.assertEqual(body['code'], 'spring-survey-2025')
    self.assertEqual(body['parent_id'], 9)
    self.assertEqual(body['type'], 'Link')
    self.assertEqual(body['status'], 'active')
    self.assertTrue(body['operating_24_7'])

  def test_create_link_campaign_without_name(self):
    with self.assertRaises(ValueError):
      self.client.create_link_campaign('', 9)
    self.session.request.assert_not_called()

  def test_assign_flow_with_empty_response(self):
    self.session.request.return_value = mock_response(None)

    self.assertEqual(self.client.assign_flow('channel-1', 'flow-1'), {})
    args, kwargs = self._call_args()
    self.assertEqual(
        args,
        ('POST', 'https://api.try.psn.cx/v1/nodes/channel-1/assign_flow'),
    )
    self.assertEqual(kwargs['json'], {'id': 'channel-1', 'flow_id': 'flow-1'})

  def test_error_status(self):
    """Tests that non 2xx responses raise with the status code."""
    self.session.request.return_value = mock_response(
        {'error': 'unauthorized'}, status_code=401
    )
    with self.assertRaises(pisano_client.PisanoApiError) as context:
      self.client.complete_login()
    self.assertEqual(context.exception.status_code, 401)
    self.assertEqual(self.session.request.call_count, 1)

  def test_transport_error(self):
    self.session.request.side_effect = requests.ConnectionError('down')
    with self.assertRaises(pisano_client.PisanoApiError):
      self.client.fetch_languages()

  def test_invalid_json(self):
    response = mock_response({})
    response.json.side_effect = ValueError('not json')
    self.session.request.return_value = response
    with self.assertRaises(pisano_client.PisanoApiError):
      self.client.create_flow({}, 9)

  def test_urls(self):
    self.assertEqual(
        self.client.web_feedback_url('channel-1'),
        'https://web.try.psn.cx/web_feedback?node_id=channel-1',
    )
    self.assertEqual(
        self.client.flow_dashboard_url('flow-1'),
        'https://try.psn.cx/beta/dashboard/flows/flow-1',
    )

  def test_web_feedback_url_for_production_host(self):
    client = pisano_client.PisanoClient(
        token='secret', environment='prodtr', session=self.session
    )
    self.assertEqual(
        client.web_feedback_url(5),
        'https://web.pisano.com.tr/web_feedback?node_id=5',
    )

  def test_web_feedback_url_without_api_host(self):
    client = pisano_client.PisanoClient(
        token='secret', base_url='http://localhost', session=self.session
    )
    with self.assertRaises(ValueError):
      client.web_feedback_url('channel-1')


if __name__ == '__main__':
  unittest.main()
