import json
from unittest.mock import patch

import pytest
import yaml

import fakes
from srm_cmdlets.cli import OutputFormatter, args_to_config, create_parser, load_connector, main
from srm_cmdlets.core.exceptions import ConnectorError

CONNECTION = ['--server', 'srm-a', '--user', 'admin', '--password', 'secret',
              '--connector', 'fakes:connect']


@pytest.fixture
def connected(site, monkeypatch):
    monkeypatch.setitem(fakes.SERVICES, 'srm-a', site['service'])
    return site


class TestParser:

    def test_common_flags(self):
        args = create_parser().parse_args(['groups', '--type', 'vr'] + CONNECTION)
        assert args.command == 'groups'
        assert args.type == 'vr'
        assert args.format is None
        assert args.quiet is False

    def test_server_is_required(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(['groups', '--user', 'admin'])

    def test_invalid_mode_is_rejected(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(['start', 'Web-RP', '--mode', 'dance'] + CONNECTION)

    def test_results_timestamps(self):
        args = create_parser().parse_args(
            ['results', 'Web-RP', '--after', '2024-05-01T08:00:00'] + CONNECTION
        )
        assert args.after.hour == 8
        assert args.before is None

    def test_quiet_disables_confirmation(self):
        args = create_parser().parse_args(['stop', 'Web-RP', '--quiet', '--timeout', '60']
                                          + CONNECTION)
        config = args_to_config(args)
        assert config.confirm is False
        assert config.task_timeout == 60
        assert config.connector == 'fakes:connect'

    def test_flags_override_config_file(self, tmp_path):
        path = tmp_path / 'srm.yaml'
        path.write_text("output_format: yaml\ntask_timeout: 900\n")
        args = create_parser().parse_args(['plans', '--config', str(path), '--format', 'csv']
                                          + CONNECTION)
        config = args_to_config(args)
        assert config.output_format == 'csv'
        assert config.task_timeout == 900


class TestOutputFormatter:
    rows = [{'name': 'Web-PG', 'type': 'vr'}, {'name': 'DB-PG', 'type': 'san'}]

    def test_table(self):
        lines = OutputFormatter.format_output(self.rows, 'table').splitlines()
        assert lines[0].split() == ['NAME', 'TYPE']
        assert lines[2].split() == ['DB-PG', 'san']

    def test_empty_table(self):
        assert OutputFormatter.format_output([], 'table') == "Listed 0 items."

    def test_csv(self):
        assert OutputFormatter.format_output(self.rows, 'csv') == "name,type\nWeb-PG,vr\nDB-PG,san"

    def test_json_and_yaml(self):
        assert json.loads(OutputFormatter.format_output(self.rows, 'json')) == self.rows
        assert yaml.safe_load(OutputFormatter.format_output(self.rows, 'yaml')) == self.rows


class TestConnector:

    def test_load(self):
        assert load_connector('fakes:connect') is fakes.connect

    @pytest.mark.parametrize('spec', ['fakes', 'no_such_module_xyz:connect', 'fakes:SERVICES'])
    def test_invalid(self, spec):
        with pytest.raises(ConnectorError):
            load_connector(spec)


class TestMain:

    def test_groups_as_json(self, connected, capsys):
        code = main(['groups', '--format', 'json'] + CONNECTION)

        rows = json.loads(capsys.readouterr().out)
        assert code == 0
        assert [r['name'] for r in rows] == ['Web-PG', 'DB-PG']
        assert connected['service'].calls[0] == ('SrmLoginLocale', 'admin')
        assert connected['service'].calls[-1] == ('SrmLogoutLocale',)

    def test_unprotected_vms(self, connected, capsys):
        code = main(['unprotected-vms', '--group', 'Web-PG', '--format', 'csv'] + CONNECTION)
        assert code == 0
        assert capsys.readouterr().out.splitlines() == ['vmName,moRef', 'web-01,vm-1',
                                                       'web-03,vm-3']

    def test_protect_by_name(self, connected):
        code = main(['protect', 'Web-PG', 'web-01', '--quiet'] + CONNECTION)
        assert code == 0
        assert connected['web_pg'].calls == [
            ('AssociateVms', ['vm-1']),
            ('ProtectVms', ['vm-1']),
        ]

    def test_unknown_vm_name(self, connected, capsys):
        code = main(['protect', 'Web-PG', 'nope', '--quiet'] + CONNECTION)
        assert code == 1
        assert 'nope' in capsys.readouterr().err

    def test_start_protecting_plan_fails(self, connected):
        connected['plan'].state = 'Protecting'
        assert main(['start', 'Web-RP', '--quiet'] + CONNECTION) == 1
        assert connected['plan'].calls == []

    def test_password_is_prompted(self, connected):
        args = [a for a in CONNECTION if a not in ('--password', 'secret')]
        with patch('srm_cmdlets.cli.text_prompt', return_value='secret') as prompt:
            assert main(['version'] + args) == 0
        assert prompt.call_args.kwargs['mask'] is True

    def test_missing_connector(self, capsys):
        code = main(['version', '--server', 'srm-a', '--user', 'admin', '--password', 'x'])
        assert code == 1
        assert 'No SRM connector configured' in capsys.readouterr().err

    def test_ctrl_c(self, connected):
        with patch('srm_cmdlets.cli.open_session', side_effect=KeyboardInterrupt):
            assert main(['version'] + CONNECTION) == 130
