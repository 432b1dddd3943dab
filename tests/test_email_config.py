"""
Unit Tests — Email Config & Reporting Config
=============================================
Route validation at load time and per-report deserialization.
"""
import pytest

from bugmail.core.exceptions import ConfigError
from bugmail.core.reporting_config import load_reporting_config
from bugmail.models.email_config import EmailConfig


# ===========================================================================
# 1. EmailConfig
# ===========================================================================
@pytest.mark.parametrize("moderation,mail_maintainers,ok", [
    (False, False, True),
    (True, False, True),
    (False, True, True),
    (True, True, False),
])
def test_flag_combinations(moderation, mail_maintainers, ok):
    cfg = EmailConfig(email="bugs@lists.example.org", moderation=moderation,
                      mail_maintainers=mail_maintainers)
    if ok:
        cfg.check()
    else:
        with pytest.raises(ConfigError, match="both moderation and mail_maintainers"):
            cfg.check()


def test_bad_address_rejected():
    with pytest.raises(ConfigError, match="bad email address"):
        EmailConfig(email="not an address").check()


def test_type_and_need_maintainers():
    cfg = EmailConfig(email="a@x.org", mail_maintainers=True)
    assert cfg.type == "email"
    assert cfg.need_maintainers is True


def test_from_blob():
    cfg = EmailConfig.from_blob(b'{"email": "list@x.org", "mail_maintainers": true}')
    assert cfg.email == "list@x.org"
    assert cfg.mail_maintainers is True
    assert cfg.moderation is False


def test_from_blob_rejects_bad_address():
    with pytest.raises(ConfigError, match="bad email address"):
        EmailConfig.from_blob(b'{"email": "not-an-address"}')


@pytest.mark.parametrize("blob", [b"", b"{not json", b'{"moderation": true}'])
def test_from_blob_malformed(blob):
    with pytest.raises(ConfigError, match="failed to unmarshal email config"):
        EmailConfig.from_blob(blob)


# ===========================================================================
# 2. Reporting config file
# ===========================================================================
_GOOD = """
namespaces:
  upstream:
    reporting:
      - name: moderation
        type: email
        config:
          email: mod@lists.example.org
          moderation: true
      - name: public
        type: email
        config:
          email: bugs@lists.example.org
          mail_maintainers: true
  internal:
    reporting:
      - name: tracker
        type: tracker
        config:
          project: KERNEL
"""


def test_load_good_config(tmp_path):
    path = tmp_path / "reporting.yaml"
    path.write_text(_GOOD)
    config = load_reporting_config(str(path))
    emails = sorted(cfg.email for cfg in config.email_configs())
    assert emails == ["bugs@lists.example.org", "mod@lists.example.org"]


def test_load_rejects_exclusive_flags(tmp_path):
    path = tmp_path / "reporting.yaml"
    path.write_text(_GOOD.replace("moderation: true", "moderation: true\n          mail_maintainers: true"))
    with pytest.raises(ConfigError, match="moderation"):
        load_reporting_config(str(path))


def test_load_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="cannot read"):
        load_reporting_config(str(tmp_path / "nope.yaml"))


def test_load_malformed_yaml(tmp_path):
    path = tmp_path / "reporting.yaml"
    path.write_text("namespaces: [unclosed\n")
    with pytest.raises(ConfigError, match="malformed"):
        load_reporting_config(str(path))


def test_load_empty_file(tmp_path):
    path = tmp_path / "reporting.yaml"
    path.write_text("")
    config = load_reporting_config(str(path))
    assert list(config.email_configs()) == []
