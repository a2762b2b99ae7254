#!/usr/bin/env python3
"""
Unit tests for classifying server responses.
"""

import unittest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from glide_common.protocol_definitions import (
    ConnectedUsers, Failure, GlideRequest, GlideRequestSent, IncomingRequests, OkSuccess,
    UnknownCommand, UsernameInvalid, UsernameOk, UsernameTaken, classify_response, encode_response
)


class TestClassifyResponse(unittest.TestCase):
    """Test cases for classify_response."""
    
    def test_simple_tags(self):
        cases = {
            b'USERNAME_OK\n': UsernameOk(),
            b'USERNAME_TAKEN\n': UsernameTaken(),
            b'USERNAME_INVALID\n': UsernameInvalid(),
            b'GLIDE_REQUEST_SENT\n': GlideRequestSent(),
            b'OK_SUCCESS\n': OkSuccess(),
            b'UNKNOWN_COMMAND\n': UnknownCommand(),
        }
        for raw, expected in cases.items():
            with self.subTest(raw=raw):
                self.assertEqual(classify_response(raw), expected)
    
    def test_connected_users(self):
        self.assertEqual(
            classify_response(b'CONNECTED_USERS alice, bob,c.d\n'),
            ConnectedUsers(users=['alice', 'bob', 'c.d'])
        )
    
    def test_connected_users_empty(self):
        self.assertEqual(classify_response(b'CONNECTED_USERS\n'), ConnectedUsers(users=[]))
    
    def test_incoming_requests(self):
        raw = b'INCOMING_REQUESTS [{"sender": "alice", "filename": "a b.txt"}, {"sender": "bob", "filename": "c.png"}]\n'
        self.assertEqual(
            classify_response(raw),
            IncomingRequests(requests=[GlideRequest('alice', 'a b.txt'), GlideRequest('bob', 'c.png')])
        )
    
    def test_malformed_requests_payload(self):
        """A known tag with a broken payload becomes a failure, not an exception."""
        response = classify_response(b'INCOMING_REQUESTS [{"sender": "alice"\n')
        self.assertIsInstance(response, Failure)
        self.assertIn('Malformed', response.reason)
    
    def test_error_reason(self):
        self.assertEqual(classify_response(b'ERROR User @carol is not connected\n'),
                         Failure(reason='User @carol is not connected'))
    
    def test_unrecognised_tag_degrades_to_unknown(self):
        """Text the client cannot interpret never raises."""
        for raw in (b'HELLO THERE\n', b'\n', b'', b'\xff\xfe garbage'):
            with self.subTest(raw=raw):
                self.assertEqual(classify_response(raw), UnknownCommand())
    
    def test_encoded_responses_classify_back(self):
        responses = [
            UsernameOk(), UsernameTaken(), UsernameInvalid(), GlideRequestSent(), OkSuccess(),
            UnknownCommand(),
            ConnectedUsers(users=['alice', 'bob']),
            ConnectedUsers(users=[]),
            IncomingRequests(requests=[GlideRequest('alice', 'x:y.txt')]),
            IncomingRequests(requests=[]),
            Failure(reason='Request not found'),
            Failure(reason=''),
            Failure(reason='  padded reason \n'),
            Failure(),
        ]
        for response in responses:
            with self.subTest(response=response):
                self.assertEqual(classify_response(encode_response(response)), response)
    
    def test_failure_reason_is_normalised(self):
        """Blank reasons fall back to the default; whitespace collapses to single spaces."""
        self.assertEqual(Failure(reason='').reason, 'Unspecified server error')
        self.assertEqual(Failure(reason=' \t').reason, 'Unspecified server error')
        self.assertEqual(Failure(reason=' two\nlines ').reason, 'two lines')
        self.assertEqual(Failure(reason=' x '), Failure(reason='x'))
    
    def test_descriptions(self):
        self.assertEqual(str(UsernameTaken()), 'Username is already taken')
        self.assertEqual(str(Failure(reason='nope')), 'nope')


if __name__ == '__main__':
    unittest.main()
