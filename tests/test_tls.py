"""Tests for the TLS platform utilities."""

import socket
import ssl
from unittest.mock import Mock

import pytest

from ctpolicy.stores import MappingPropertyStore, get_default_store
from ctpolicy.utils.tls import (
    SNI_HOST_NAME,
    TLSParameters,
    create_ssl_context,
    get_file_descriptor,
    is_ct_enabled_by_default,
    is_literal_ip_address,
    is_sni_enabled_by_default,
    is_valid_sni_hostname,
)


class TestDefaults:
    def test_sni_on_by_default(self):
        assert is_sni_enabled_by_default() is True

    def test_ct_off_by_default(self):
        assert is_ct_enabled_by_default() is False

    def test_ct_follows_global_switch(self):
        assert is_ct_enabled_by_default(MappingPropertyStore({"conscrypt.ct.enable": "True"})) is True
        assert is_ct_enabled_by_default(MappingPropertyStore({"conscrypt.ct.enable": "on"})) is False

    def test_ct_reads_default_store(self):
        get_default_store().set("conscrypt.ct.enable", "true")
        assert is_ct_enabled_by_default() is True


class TestLiteralIpAddress:
    @pytest.mark.parametrize("hostname", [
        "192.168.0.1",
        "::1",
        "2001:db8::1",
        "[2001:db8::1]",
        "fe80::1%eth0",
    ])
    def test_literals(self, hostname):
        assert is_literal_ip_address(hostname) is True

    @pytest.mark.parametrize("hostname", [None, "", "example.com", "localhost", "1.2.3", "256.0.0.1"])
    def test_names(self, hostname):
        assert is_literal_ip_address(hostname) is False


class TestValidSniHostname:
    @pytest.mark.parametrize("hostname", ["example.com", "a.b.c.example.org", "localhost", "LocalHost"])
    def test_valid(self, hostname):
        assert is_valid_sni_hostname(hostname) is True

    @pytest.mark.parametrize("hostname", [
        None,
        "",
        "intranet",
        "10.0.0.1",
        "example.com.",
        "exa\0mple.com",
    ])
    def test_invalid(self, hostname):
        assert is_valid_sni_hostname(hostname) is False


class TestTLSParameters:
    def test_defaults(self):
        params = TLSParameters()
        assert params.endpoint_identification_algorithm is None
        assert params.use_cipher_suites_order is False
        assert params.server_names == []
        assert params.use_sni is True
        assert params.sni_hostname is None

    def test_sni_hostname_is_first_host_name(self):
        params = TLSParameters(server_names=[(1, "other"), (SNI_HOST_NAME, "a.example.com"), (SNI_HOST_NAME, "b.example.com")])
        assert params.sni_hostname == "a.example.com"

    def test_server_hostname(self):
        params = TLSParameters(server_names=[(SNI_HOST_NAME, "example.com")])
        assert params.server_hostname == "example.com"

    def test_server_hostname_without_sni(self):
        params = TLSParameters(server_names=[(SNI_HOST_NAME, "example.com")], use_sni=False)
        assert params.server_hostname is None

    def test_server_hostname_rejects_ip_literal(self):
        params = TLSParameters(server_names=[(SNI_HOST_NAME, "10.0.0.1")])
        assert params.server_hostname is None

    def test_apply_to_context(self):
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        params = TLSParameters(endpoint_identification_algorithm="HTTPS", use_cipher_suites_order=True)
        assert params.apply_to_context(context) is context
        assert context.check_hostname is True
        assert context.options & ssl.OP_CIPHER_SERVER_PREFERENCE

    def test_default_params_keep_hostname_check(self):
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        TLSParameters().apply_to_context(context)
        assert context.check_hostname is True
        assert context.verify_mode == ssl.CERT_REQUIRED
        assert not context.options & ssl.OP_CIPHER_SERVER_PREFERENCE

    def test_https_does_not_enable_verification(self):
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
        TLSParameters(endpoint_identification_algorithm="HTTPS").apply_to_context(context)
        assert context.check_hostname is False
        assert context.verify_mode == ssl.CERT_NONE

    def test_https_enables_hostname_check(self):
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        context.check_hostname = False
        TLSParameters(endpoint_identification_algorithm="https").apply_to_context(context)
        assert context.check_hostname is True

    def test_from_context(self):
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        context.options |= ssl.OP_CIPHER_SERVER_PREFERENCE
        params = TLSParameters.from_context(context, hostname="example.com")
        assert params.endpoint_identification_algorithm == "HTTPS"
        assert params.use_cipher_suites_order is True
        assert params.server_names == [(SNI_HOST_NAME, "example.com")]

    @pytest.mark.parametrize("hostname", [None, "10.0.0.1", "intranet", "example.com."])
    def test_from_context_skips_invalid_sni(self, hostname):
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        assert TLSParameters.from_context(context, hostname=hostname).server_names == []

    def test_from_context_without_sni(self):
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        params = TLSParameters.from_context(context, hostname="example.com", use_sni=False)
        assert params.use_sni is False
        assert params.server_names == []

    def test_round_trip_through_context(self):
        original = TLSParameters(
            endpoint_identification_algorithm="HTTPS",
            use_cipher_suites_order=True,
            server_names=[(SNI_HOST_NAME, "example.com")],
        )
        context = original.apply_to_context(ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT))
        restored = TLSParameters.from_context(context, hostname=original.server_hostname)
        assert restored == original


class TestCreateSslContext:
    def test_verifying_by_default(self):
        context = create_ssl_context()
        assert context.verify_mode == ssl.CERT_REQUIRED
        assert context.check_hostname is True

    def test_no_verify(self):
        context = create_ssl_context(verify=False)
        assert context.verify_mode == ssl.CERT_NONE
        assert context.check_hostname is False

    def test_params_applied(self):
        context = create_ssl_context(params=TLSParameters(use_cipher_suites_order=True))
        assert context.options & ssl.OP_CIPHER_SERVER_PREFERENCE

    def test_default_params_keep_verification(self):
        context = create_ssl_context(params=TLSParameters())
        assert context.verify_mode == ssl.CERT_REQUIRED
        assert context.check_hostname is True

    def test_no_verify_wins_over_https_params(self):
        params = TLSParameters(endpoint_identification_algorithm="HTTPS")
        context = create_ssl_context(verify=False, params=params)
        assert context.verify_mode == ssl.CERT_NONE
        assert context.check_hostname is False


class TestFileDescriptor:
    def test_socket(self):
        with socket.socket() as sock:
            assert get_file_descriptor(sock) == sock.fileno()

    def test_stream_writer(self):
        sock = Mock()
        sock.fileno.return_value = 7
        writer = Mock(spec=["get_extra_info"])
        writer.get_extra_info.return_value = sock

        assert get_file_descriptor(writer) == 7
        writer.get_extra_info.assert_called_once_with("socket")

    def test_falls_back_when_fileno_fails(self):
        sock = Mock()
        sock.fileno.return_value = 9
        transport = Mock(spec=["fileno", "get_extra_info"])
        transport.fileno.side_effect = OSError("not supported")
        transport.get_extra_info.return_value = sock

        assert get_file_descriptor(transport) == 9

    def test_closed_socket(self):
        sock = socket.socket()
        sock.close()
        with pytest.raises(ValueError):
            get_file_descriptor(sock)

    def test_no_descriptor(self):
        writer = Mock(spec=["get_extra_info"])
        writer.get_extra_info.return_value = None
        with pytest.raises(ValueError):
            get_file_descriptor(writer)
        with pytest.raises(ValueError):
            get_file_descriptor(object())
