"""
Test the YAML network configuration store
"""
import pytest
import yaml

from wgnet.config.policy_store import PolicyStore, default_policy
from wgnet.core.exceptions import WgnetConfigurationError


@pytest.fixture
def store(temp_dir):
    return PolicyStore(temp_dir)


def write(path, content):
    path.write_text(content, encoding='utf-8')
    return path


class TestLoad:

    def test_load_by_name(self, store, temp_dir):
        write(temp_dir / "office.yml", """
interface: wg0
routing:
  route_subnet: false
  networks:
    - 10.0.1.0/24
nat:
  enabled: true
  out_interface: eth0
firewall_hosts:
  - host: 10.0.0.5
    allowed_ports: [22, 443]
""")

        policy = store.load("office")

        assert policy.interface_name == "wg0"
        assert policy.routed_networks == ["10.0.1.0/24"]
        assert policy.nat_enabled is True
        assert policy.nat_out_interface == "eth0"
        assert policy.firewall_hosts[0].allowed_ports == [22, 443]

    def test_yaml_suffix(self, store, temp_dir):
        write(temp_dir / "lab.yaml", "interface: wg2\n")

        assert store.load("lab").interface_name == "wg2"

    def test_load_by_path(self, store, temp_dir):
        other = temp_dir / "elsewhere"
        other.mkdir()
        path = write(other / "custom.yml", "interface: wg3\n")

        assert store.load(str(path)).interface_name == "wg3"

    def test_missing(self, store):
        with pytest.raises(WgnetConfigurationError) as exc_info:
            store.load("absent")

        assert "does not exist" in str(exc_info.value)

    @pytest.mark.parametrize("content", [
        "interface: [wg0\n",
        "- just\n- a list\n",
        "routing:\n  networks: []\n",
        "interface: wg0\nrouting:\n  networks: [not-a-network]\n",
        "interface: wg0\nrouting: yes\n",
    ])
    def test_invalid_documents(self, store, temp_dir, content):
        write(temp_dir / "broken.yml", content)

        with pytest.raises(WgnetConfigurationError):
            store.load("broken")


class TestSaveAndCreate:

    def test_save_writes_document_layout(self, store, temp_dir, full_policy):
        path = store.save("office", full_policy)

        assert path == temp_dir / "office.yml"
        document = yaml.safe_load(path.read_text())
        assert list(document) == ['interface', 'routing', 'nat', 'firewall_hosts']
        assert store.load("office") == full_policy

    def test_create_default(self, store):
        policy = store.create_default("wg5")

        assert policy == default_policy("wg5")
        assert store.exists("wg5")
        assert store.load("wg5").routed_networks == []

    def test_create_default_with_interface_name(self, store):
        policy = store.create_default("office", interface_name="wg7")

        assert policy.interface_name == "wg7"

    def test_create_default_rejects_unusable_interface_name(self, store, temp_dir):
        with pytest.raises(WgnetConfigurationError) as exc_info:
            store.create_default("office-vpn-network")

        assert "office-vpn-network" in exc_info.value.message
        assert not (temp_dir / "office-vpn-network.yml").exists()

    def test_default_policy_rejects_invalid_name(self):
        with pytest.raises(WgnetConfigurationError):
            default_policy("wg 0")

    def test_create_refuses_to_overwrite(self, store, full_policy):
        store.save("wg0", full_policy)

        with pytest.raises(WgnetConfigurationError):
            store.create_default("wg0")
        assert store.load("wg0") == full_policy

    def test_create_force_overwrites(self, store, full_policy):
        store.save("wg0", full_policy)

        store.create_default("wg0", force=True)

        assert store.load("wg0").firewall_hosts == []

    def test_read_text_and_remove(self, store, full_policy):
        store.save("wg0", full_policy)

        assert "firewall_hosts" in store.read_text("wg0")
        assert store.remove("wg0") is True
        assert store.remove("wg0") is False
        with pytest.raises(WgnetConfigurationError):
            store.read_text("wg0")


class TestListConfigs:

    def test_lists_only_configs(self, store, temp_dir):
        write(temp_dir / "b.yml", "interface: wg1\n")
        write(temp_dir / "a.yaml", "interface: wg0\n")
        write(temp_dir / "notes.txt", "ignored\n")
        (temp_dir / "sub.yml").mkdir()

        assert [path.name for path in store.list_configs()] == ["a.yaml", "b.yml"]

    def test_missing_directory(self, temp_dir):
        assert PolicyStore(temp_dir / "missing").list_configs() == []
