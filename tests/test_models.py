"""Tests for data models."""

import dataclasses

import boto3
import httpx
import pytest

from s3request.errors import InvalidRequestParameter, MissingCredentials
from s3request.models import (
    AclShort,
    Credentials,
    RequestDescriptor,
    SignatureVersion,
    SignedRequest,
)


class TestEnums:
    """Tests for SignatureVersion and AclShort enums."""

    def test_signature_versions(self):
        assert SignatureVersion.V2.value == "v2"
        assert SignatureVersion.V4.value == "v4"

    def test_canned_acls(self):
        assert {acl.value for acl in AclShort} == {
            "private",
            "public-read",
            "public-read-write",
            "authenticated-read",
        }


class TestCredentials:
    """Tests for Credentials dataclass."""

    def test_secret_hidden_from_repr(self):
        """Secret key and token never show up in repr."""
        creds = Credentials("AKID", "super-secret", session_token="token-value")

        text = repr(creds)

        assert "AKID" in text
        assert "super-secret" not in text
        assert "token-value" not in text

    def test_immutable(self):
        creds = Credentials("AKID", "secret")

        with pytest.raises(dataclasses.FrozenInstanceError):
            creds.access_key_id = "other"

    def test_from_boto3_session(self):
        """Credentials are frozen from an explicitly configured session."""
        session = boto3.Session(
            aws_access_key_id="AKIDFROMSESSION",
            aws_secret_access_key="session-secret",
            aws_session_token="session-token",
            region_name="us-east-1",
        )

        creds = Credentials.from_boto3_session(session)

        assert creds.access_key_id == "AKIDFROMSESSION"
        assert creds.secret_access_key == "session-secret"
        assert creds.session_token == "session-token"

    def test_from_boto3_session_without_credentials(self):
        """A session that resolves nothing raises MissingCredentials."""

        class EmptySession:
            def get_credentials(self):
                return None

        with pytest.raises(MissingCredentials):
            Credentials.from_boto3_session(EmptySession())


class TestRequestDescriptor:
    """Tests for RequestDescriptor dataclass."""

    def test_defaults(self):
        descriptor = RequestDescriptor(method="GET", path="bucket/")

        assert descriptor.use_virtual_host is True
        assert descriptor.signature_version is None
        assert descriptor.query_extra == ()
        assert dict(descriptor.headers_extra) == {}
        assert descriptor.body is None

    def test_invalid_method_rejected(self):
        with pytest.raises(InvalidRequestParameter, match="method"):
            RequestDescriptor(method="PATCH", path="bucket/")

    def test_headers_cannot_be_mutated(self):
        """headers_extra is a read-only copy of the caller's mapping."""
        headers = {"Content-Type": "text/plain"}
        descriptor = RequestDescriptor(method="PUT", path="b/k", headers_extra=headers)

        headers["Content-Type"] = "changed"

        assert descriptor.headers_extra["Content-Type"] == "text/plain"
        with pytest.raises(TypeError):
            descriptor.headers_extra["X-New"] = "value"

    def test_query_extra_becomes_tuple(self):
        descriptor = RequestDescriptor(
            method="GET", path="b/", query_extra=[("prefix", "a")]
        )
        assert descriptor.query_extra == (("prefix", "a"),)

    def test_frozen(self):
        descriptor = RequestDescriptor(method="GET", path="b/")

        with pytest.raises(dataclasses.FrozenInstanceError):
            descriptor.method = "PUT"


class TestSignedRequest:
    """Tests for SignedRequest.to_httpx."""

    def test_to_httpx(self):
        """The httpx request carries method, URL, headers and body."""
        signed = SignedRequest(
            method="PUT",
            url="https://my-bucket.s3.amazonaws.com/a/b%20c.txt?acl",
            host="my-bucket.s3.amazonaws.com",
            path="/a/b%20c.txt",
            headers={"Authorization": "AWS AKID:sig", "Date": "Fri, 24 May 2013 00:00:00 GMT"},
            body=b"<AccessControlPolicy/>",
        )

        request = signed.to_httpx()

        assert isinstance(request, httpx.Request)
        assert request.method == "PUT"
        assert request.url.host == "my-bucket.s3.amazonaws.com"
        assert request.url.raw_path == b"/a/b%20c.txt?acl"
        assert request.headers["Authorization"] == "AWS AKID:sig"
        assert request.content == b"<AccessControlPolicy/>"
