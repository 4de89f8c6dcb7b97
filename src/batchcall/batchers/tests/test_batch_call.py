"""End-to-end tests for the BatchCall engine against a fake node."""

import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from batchcall import BatchCall, ConfigError, ContractGroup, MethodSpec, RegistrationError
from batchcall.core.storage import MemoryAbiStore

PRICE_ADDRESS = "0x1111111111111111111111111111111111111111"
BALANCE_ADDRESS = "0x2222222222222222222222222222222222222222"
HOLDER = "0x3333333333333333333333333333333333333333"
OTHER_HOLDER = "0x4444444444444444444444444444444444444444"


def scenario_groups(token_abi):
    return [
        {
            "namespace": "pricing",
            "addresses": [PRICE_ADDRESS],
            "abi": token_abi,
            "readMethods": [{"name": "getPrice"}],
        },
        {
            "addresses": [BALANCE_ADDRESS],
            "abi": token_abi,
            "readMethods": [{"name": "getBalance", "args": [HOLDER]}],
        },
    ]


class TestBatchCall:
    """Test cases for BatchCall.execute."""

    def test_requires_web3_or_provider(self):
        with pytest.raises(ConfigError):
            BatchCall()

    def test_provider_url_builds_async_web3(self):
        batch_call = BatchCall(provider="http://localhost:8545")

        assert batch_call.web3 is not None
        assert batch_call.read_contracts == set()

    @pytest.mark.asyncio
    async def test_flat_scenario(self, web3, node, token_abi):
        batch_call = BatchCall(web3=web3)

        result = await batch_call.execute(scenario_groups(token_abi))

        assert len(node.batches) == 1
        assert result[0] == {
            "address": PRICE_ADDRESS,
            "namespace": "pricing",
            "getPrice": [{"value": 1500}],
        }
        balance = result[1]
        assert balance["address"] == BALANCE_ADDRESS
        assert balance["namespace"] == "default"
        assert balance["getBalance"][0]["value"] == 42
        assert balance["getBalance"][0]["args"] == [HOLDER]
        assert balance["getBalance"][0]["input"].startswith("0x")

    @pytest.mark.asyncio
    async def test_grouped_scenario(self, web3, token_abi):
        batch_call = BatchCall(web3=web3, group_by_namespace=True)

        result = await batch_call.execute(scenario_groups(token_abi))

        assert list(result) == ["pricing", "default"]
        assert result["pricing"] == [{"address": PRICE_ADDRESS, "getPrice": [{"value": 1500}]}]
        assert result["default"][0]["address"] == BALANCE_ADDRESS
        assert "namespace" not in result["default"][0]

    @pytest.mark.asyncio
    async def test_simplified_scenario(self, web3, token_abi):
        batch_call = BatchCall(web3=web3, simplify_response=True)

        result = await batch_call.execute(scenario_groups(token_abi))

        assert result[0]["getPrice"] == 1500
        assert result[1]["getBalance"] == 42

    @pytest.mark.asyncio
    async def test_duplicate_calls_are_deduplicated(self, web3, node, token_abi):
        batch_call = BatchCall(web3=web3)
        group = {
            "addresses": [BALANCE_ADDRESS],
            "abi": token_abi,
            "readMethods": [
                {"name": "getBalance", "args": [HOLDER]},
                {"name": "getBalance", "args": [HOLDER]},
                {"name": "getBalance", "args": [OTHER_HOLDER]},
                {"name": "symbol"},
                {"name": "symbol"},
            ],
        }

        result = await batch_call.execute([group])

        # Every record is sent; duplicates are folded away afterwards
        assert len(node.batches[0]) == 5
        balances = result[0]["getBalance"]
        assert [(b["args"], b["value"]) for b in balances] == [([HOLDER], 42), ([OTHER_HOLDER], 7)]
        assert result[0]["symbol"] == [{"value": "TKN"}]

    @pytest.mark.asyncio
    async def test_constant_methods_read_once_per_instance(self, web3, node, token_abi):
        batch_call = BatchCall(web3=web3)
        group = {
            "addresses": [PRICE_ADDRESS],
            "abi": token_abi,
            "readMethods": [{"name": "getPrice"}, {"name": "symbol"}],
        }

        first = await batch_call.execute([group])
        second = await batch_call.execute([group])

        assert node.called_methods(0) == ["getPrice", "symbol"]
        assert node.called_methods(1) == ["symbol"]
        assert first[0]["getPrice"] == [{"value": 1500}]
        assert "getPrice" not in second[0]

    @pytest.mark.asyncio
    async def test_fresh_instance_reads_constants_again(self, web3, node, token_abi):
        group = {
            "addresses": [PRICE_ADDRESS],
            "abi": token_abi,
            "readMethods": [{"name": "getPrice"}],
        }

        await BatchCall(web3=web3).execute([group])
        await BatchCall(web3=web3).execute([group])

        assert node.called_methods(0) == ["getPrice"]
        assert node.called_methods(1) == ["getPrice"]

    @pytest.mark.asyncio
    async def test_failed_read_still_marks_address_read(self, web3, node, token_abi):
        batch_call = BatchCall(web3=web3)
        group = {
            "addresses": [PRICE_ADDRESS],
            "abi": token_abi,
            "readMethods": [{"name": "getPrice"}, {"name": "symbol"}],
        }
        node.fail(PRICE_ADDRESS, "symbol")

        first = await batch_call.execute([group])
        node.errors.clear()
        second = await batch_call.execute([group])

        assert "error" in first
        # The failed batch counts as a read: getPrice is not requested again
        assert node.called_methods(1) == ["symbol"]
        assert second == [{"address": PRICE_ADDRESS, "namespace": "default", "symbol": [{"value": "TKN"}]}]

    @pytest.mark.asyncio
    async def test_absent_method_is_not_an_error(self, web3, node, token_abi):
        batch_call = BatchCall(web3=web3)
        group = {
            "addresses": [PRICE_ADDRESS],
            "abi": token_abi,
            "readMethods": [{"name": "notAMethod"}, {"name": "symbol"}],
        }

        result = await batch_call.execute([group])

        assert node.called_methods() == ["symbol"]
        assert "notAMethod" not in result[0]

    @pytest.mark.asyncio
    async def test_only_absent_methods_yield_no_entry(self, web3, node, token_abi):
        batch_call = BatchCall(web3=web3)
        group = {"addresses": [PRICE_ADDRESS], "abi": token_abi, "readMethods": [{"name": "nope"}]}

        result = await batch_call.execute([group])

        assert result == []
        assert node.batches == []

    @pytest.mark.asyncio
    async def test_single_failure_fails_whole_batch(self, web3, node, token_abi):
        batch_call = BatchCall(web3=web3)
        node.fail(BALANCE_ADDRESS, "getBalance", "execution reverted: paused")

        result = await batch_call.execute(scenario_groups(token_abi))

        assert result == {"error": "execution reverted: paused"}

    @pytest.mark.asyncio
    async def test_invalid_arguments_return_error(self, web3, node, token_abi):
        batch_call = BatchCall(web3=web3)
        group = {
            "addresses": [BALANCE_ADDRESS],
            "abi": token_abi,
            "readMethods": [{"name": "getBalance", "args": ["not-an-address"]}],
        }

        result = await batch_call.execute([group])

        assert set(result) == {"error"}
        assert node.batches == []

    @pytest.mark.asyncio
    async def test_registration_failure_raises_before_batch(self, web3, node, token_abi):
        store = MemoryAbiStore()
        store.set_abi = AsyncMock(side_effect=RegistrationError("store unavailable"))
        batch_call = BatchCall(web3=web3, store=store)

        with pytest.raises(RegistrationError):
            await batch_call.execute(scenario_groups(token_abi))
        assert node.batches == []

    @pytest.mark.asyncio
    async def test_registration_only_group_produces_no_entries(self, web3, node, token_abi):
        batch_call = BatchCall(web3=web3)

        result = await batch_call.execute([{"addresses": [PRICE_ADDRESS], "abi": token_abi}])
        assert result == []
        assert batch_call.store.get_abi_from_cache(PRICE_ADDRESS) == token_abi

        later = await batch_call.execute([
            {"addresses": [PRICE_ADDRESS], "readMethods": [{"name": "symbol"}]},
        ])
        assert later[0]["symbol"] == [{"value": "TKN"}]

    @pytest.mark.asyncio
    async def test_all_read_methods(self, web3, node, token_abi):
        batch_call = BatchCall(web3=web3, simplify_response=True)
        group = {"addresses": [PRICE_ADDRESS], "abi": token_abi, "allReadMethods": True}

        result = await batch_call.execute([group])

        assert node.called_methods() == ["getPrice", "symbol", "totalSupply", "getReserves"]
        assert result[0]["getReserves"] == [10, 20, 1700000000]
        assert result[0]["totalSupply"] == [{"value": 0}]

    @pytest.mark.asyncio
    async def test_contract_handles(self, web3, node, token_abi):
        contract = MagicMock()
        contract.address = BALANCE_ADDRESS
        contract.abi = token_abi
        batch_call = BatchCall(web3=web3)

        result = await batch_call.execute([
            ContractGroup(namespace="live", contracts=[contract], read_methods=[MethodSpec("symbol")]),
        ])

        assert result == [{"address": BALANCE_ADDRESS, "namespace": "live", "symbol": [{"value": "TKN"}]}]
        assert batch_call.store.get_abi_from_cache(BALANCE_ADDRESS) is None

    @pytest.mark.asyncio
    async def test_block_pin(self, web3, node, token_abi):
        batch_call = BatchCall(web3=web3)

        await batch_call.execute(scenario_groups(token_abi), block_number=17000000)

        assert {params[1] for _, params in node.requests} == {hex(17000000)}

    @pytest.mark.asyncio
    async def test_logs_method_count_and_execution_time(self, web3, token_abi, caplog):
        batch_call = BatchCall(web3=web3, log_execution=True)

        with caplog.at_level(logging.INFO, logger="batchcall"):
            await batch_call.execute(scenario_groups(token_abi))

        lines = [r.getMessage() for r in caplog.records if "[BatchCall]" in r.getMessage()]
        assert len(lines) == 1
        assert lines[0].startswith("[BatchCall] methods: 2, execution time: ")
        assert lines[0].endswith(" ms")

    @pytest.mark.asyncio
    async def test_no_log_line_when_disabled(self, web3, token_abi, caplog):
        batch_call = BatchCall(web3=web3)

        with caplog.at_level(logging.INFO, logger="batchcall"):
            await batch_call.execute(scenario_groups(token_abi))

        assert not any("[BatchCall]" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_context_manager_loads_stored_abis(self, web3, node, token_abi):
        store = MemoryAbiStore()
        await store.set_abi(PRICE_ADDRESS, token_abi)

        async with BatchCall(web3=web3, store=store) as batch_call:
            result = await batch_call.execute([
                {"addresses": [PRICE_ADDRESS], "readMethods": [{"name": "symbol"}]},
            ])

        assert result[0]["symbol"] == [{"value": "TKN"}]
        assert store.is_connected is False

    @pytest.mark.asyncio
    async def test_constant_method_read_by_later_group_in_same_batch(self, web3, node, token_abi):
        batch_call = BatchCall(web3=web3)
        groups = [
            {"namespace": "a", "addresses": [PRICE_ADDRESS], "abi": token_abi,
             "readMethods": [{"name": "symbol"}]},
            {"namespace": "b", "addresses": [PRICE_ADDRESS], "abi": token_abi,
             "readMethods": [{"name": "getPrice"}]},
        ]

        result = await batch_call.execute(groups)

        assert node.called_methods() == ["symbol", "getPrice"]
        assert result == [{
            "address": PRICE_ADDRESS,
            "namespace": "a",
            "symbol": [{"value": "TKN"}],
            "getPrice": [{"value": 1500}],
        }]

    @pytest.mark.asyncio
    async def test_unencodable_call_leaves_engine_untouched(self, web3, node, token_abi):
        batch_call = BatchCall(web3=web3)
        groups = [
            {"addresses": [PRICE_ADDRESS], "abi": token_abi, "readMethods": [{"name": "getPrice"}]},
            {"addresses": [BALANCE_ADDRESS], "abi": token_abi,
             "readMethods": [{"name": "getBalance", "args": ["bad"]}]},
        ]
        tasks_before = asyncio.all_tasks()

        result = await batch_call.execute(groups)

        assert set(result) == {"error"}
        assert node.batches == []
        assert asyncio.all_tasks() == tasks_before
        assert batch_call.read_contracts == set()

        # Nothing was sent, so constant methods are still read next time
        await batch_call.execute(groups[:1])
        assert node.called_methods() == ["getPrice"]
