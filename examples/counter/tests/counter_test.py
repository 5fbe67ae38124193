"""Counter scenario, registered for `clarinet-sim test`."""

from clarinet_sim.chain import Tx
from clarinet_sim.expect import expect_buff
from clarinet_sim.harness import Clarinet
from clarinet_sim.values import types


async def counter_increments(chain, accounts):
    block = chain.mine_block([
        Tx.contract_call("counter", "increment", [types.uint(1)], accounts[0].address),
        Tx.contract_call("counter", "increment", [types.uint(4)], accounts[1].address),
        Tx.contract_call("counter", "increment", [types.uint(10)], accounts[2].address),
    ])
    assert block.height == 2
    block.receipts[0].result.expect_ok().expect_uint(2)
    block.receipts[1].result.expect_ok().expect_uint(6)
    block.receipts[2].result.expect_ok().expect_uint(16)

    block = chain.mine_block([
        Tx.contract_call("counter", "increment", [types.uint(1)], accounts[0].address),
        Tx.contract_call("counter", "increment", [types.uint(4)], accounts[0].address),
        Tx.contract_call("counter", "increment", [types.uint(10)], accounts[0].address),
    ])
    assert block.height == 3
    block.receipts[0].result.expect_ok().expect_uint(17)
    block.receipts[1].result.expect_ok().expect_uint(21)
    block.receipts[2].result.expect_ok().expect_uint(31)

    result = chain.get_assets_maps()
    assert result.assets["STX"][accounts[0].address] == 1000000

    call = chain.call_read_only_fn("counter", "read-counter", [], accounts[0].address)
    call.result.expect_ok().expect_uint(31)

    expect_buff("0x0001020304", bytes([0, 1, 2, 3, 4]))


Clarinet.test(
    name="Ensure that counter can be incremented multiples per block, across multiple blocks",
    fn=counter_increments,
)
