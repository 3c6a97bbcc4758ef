"""Tests for the constant pool."""

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from pyjcf.bytereader import ByteReader
from pyjcf.constants import (
    ConstantClass,
    ConstantDouble,
    ConstantFieldref,
    ConstantInteger,
    ConstantInvokeDynamic,
    ConstantLong,
    ConstantMethodref,
    ConstantPool,
    ConstantPoolTag,
    ConstantUtf8,
    ReferenceKind,
)
from pyjcf.errors import (
    ClassFileError,
    ConstantIndexError,
    ConstantTypeError,
    FormatError,
    ReservedSlotError,
    StreamError,
    UnknownConstantTagError,
)

from classbuilder import PoolBuilder, u2


@pytest.fixture
def builder():
    return PoolBuilder()


class TestBuild:
    def test_utf8_and_class(self, builder):
        idx = builder.add_class("java/lang/String")
        pool = builder.to_pool()
        assert len(pool) == 2
        assert pool.get(1) == ConstantUtf8("java/lang/String")
        assert pool.get(idx) == ConstantClass(1)
        assert pool.class_name(idx) == "java/lang/String"

    def test_scalars(self, builder):
        i = builder.add_integer(-7)
        f = builder.add_float(1.5)
        l = builder.add_long(1 << 40)
        d = builder.add_double(-2.25)
        pool = builder.to_pool()
        assert pool.get(i) == ConstantInteger(-7)
        assert pool.get(f).value == 1.5
        assert pool.get(l) == ConstantLong(1 << 40)
        assert pool.get(d) == ConstantDouble(-2.25)

    def test_long_takes_two_slots(self, builder):
        long_idx = builder.add_long(42)
        utf8_idx = builder.add_utf8("after")
        assert utf8_idx == long_idx + 2
        pool = builder.to_pool()
        assert pool.get(long_idx).value == 42
        assert pool.utf8(utf8_idx) == "after"
        assert pool.is_reserved(long_idx + 1)

    def test_double_takes_two_slots(self, builder):
        double_idx = builder.add_double(0.5)
        class_idx = builder.add_class("Foo")
        pool = builder.to_pool()
        assert pool.is_reserved(double_idx + 1)
        assert pool.class_name(class_idx) == "Foo"

    def test_long_at_last_slot(self, builder):
        builder.add_utf8("a")
        long_idx = builder.add_long(5)
        # Declare one slot fewer so the Long's continuation slot is past the end
        reader = ByteReader(builder.entry_bytes())
        pool = ConstantPool.build(reader, len(builder) - 1)
        assert len(pool) == 2
        assert pool.get(long_idx).value == 5
        assert reader.at_end()
        with pytest.raises(ConstantIndexError):
            pool.get(long_idx + 1)

    def test_double_at_last_slot(self, builder):
        double_idx = builder.add_double(3.0)
        pool = ConstantPool.build(ByteReader(builder.entry_bytes()), len(builder) - 1)
        assert len(pool) == 1
        assert pool.get(double_idx).value == 3.0

    @pytest.mark.parametrize("count", [0, 1])
    def test_empty_pool(self, count):
        pool = ConstantPool.read(ByteReader(u2(count)))
        assert len(pool) == 0
        assert list(pool) == []

    def test_unknown_tag(self):
        data = u2(3) + b"\x01" + u2(1) + b"a" + bytes([99])
        with pytest.raises(UnknownConstantTagError) as exc_info:
            ConstantPool.read(ByteReader(data))
        assert exc_info.value.tag == 99
        assert exc_info.value.index == 2
        assert "99" in str(exc_info.value)

    def test_unknown_tag_is_format_error(self):
        with pytest.raises(FormatError):
            ConstantPool.read(ByteReader(u2(2) + bytes([2])))

    def test_truncated_entry(self):
        data = u2(2) + b"\x01" + u2(5) + b"ab"
        with pytest.raises(StreamError):
            ConstantPool.read(ByteReader(data))

    def test_truncated_before_tag(self):
        with pytest.raises(StreamError):
            ConstantPool.read(ByteReader(u2(3) + b"\x03" + b"\x00\x00\x00\x01"))

    def test_method_handle_and_invoke_dynamic(self, builder):
        ref = builder.add_methodref("java/lang/invoke/LambdaMetafactory", "metafactory", "()V")
        handle = builder.add_method_handle(ReferenceKind.INVOKE_STATIC, ref)
        indy = builder.add_invoke_dynamic(0, "run", "()Ljava/lang/Runnable;")
        mtype = builder.add_method_type("()V")
        pool = builder.to_pool()
        assert pool.get_method_handle(handle).kind == ReferenceKind.INVOKE_STATIC
        assert pool.get_method_handle(handle).reference_index == ref
        entry = pool.get(indy)
        assert isinstance(entry, ConstantInvokeDynamic)
        assert entry.bootstrap_method_attr_index == 0
        assert pool.name_and_type(entry.name_and_type_index) == ("run", "()Ljava/lang/Runnable;")
        assert pool.utf8(pool.get_method_type(mtype).descriptor_index) == "()V"

    def test_module_and_package(self, builder):
        module = builder.add_module("java.base")
        package = builder.add_package("java/lang")
        pool = builder.to_pool()
        assert pool.utf8(pool.get_module(module).name_index) == "java.base"
        assert pool.utf8(pool.get_package(package).name_index) == "java/lang"

    def test_modified_utf8_entry(self, builder):
        idx = builder.add_utf8("中\x00x")
        assert builder.to_pool().utf8(idx) == "中\x00x"


class TestLookup:
    def test_every_index_resolves_or_is_reserved(self, builder):
        builder.add_class("A")
        builder.add_long(1)
        builder.add_string("s")
        builder.add_double(2.0)
        builder.add_double(3.0)
        builder.add_methodref("A", "m", "()V")
        pool = builder.to_pool()
        for index in range(1, len(builder)):
            if pool.is_reserved(index):
                with pytest.raises(IndexError):
                    pool.get(index)
            else:
                assert pool.get(index) is not None

    def test_reserved_slot_error(self, builder):
        long_idx = builder.add_long(1)
        pool = builder.to_pool()
        with pytest.raises(ReservedSlotError) as exc_info:
            pool.get(long_idx + 1)
        assert isinstance(exc_info.value, FormatError)
        assert isinstance(exc_info.value, ConstantIndexError)
        assert isinstance(exc_info.value, IndexError)

    @pytest.mark.parametrize("index", [0, -1, 3, 100])
    def test_out_of_range(self, builder, index):
        builder.add_class("A")
        pool = builder.to_pool()
        with pytest.raises(ConstantIndexError):
            pool.get(index)

    def test_out_of_range_is_index_error(self, builder):
        builder.add_utf8("x")
        pool = builder.to_pool()
        with pytest.raises(IndexError):
            pool[5]

    def test_getitem(self, builder):
        idx = builder.add_utf8("x")
        pool = builder.to_pool()
        assert pool[idx] == ConstantUtf8("x")

    def test_type_mismatch(self, builder):
        idx = builder.add_utf8("java/lang/Object")
        pool = builder.to_pool()
        with pytest.raises(ConstantTypeError) as exc_info:
            pool.get_class(idx)
        assert isinstance(exc_info.value, TypeError)
        assert isinstance(exc_info.value, ClassFileError)
        message = str(exc_info.value)
        assert "CLASS" in message
        assert "UTF8" in message
        assert exc_info.value.actual == ConstantPoolTag.UTF8

    def test_errors_do_not_invalidate_pool(self, builder):
        idx = builder.add_class("A")
        pool = builder.to_pool()
        with pytest.raises(ConstantTypeError):
            pool.get_utf8(idx)
        with pytest.raises(ConstantIndexError):
            pool.get(99)
        assert pool.class_name(idx) == "A"

    def test_class_name_through_wrong_kind(self, builder):
        # A Class entry whose name index points at an Integer
        int_idx = builder.add_integer(3)
        pool = ConstantPool.read(ByteReader(
            u2(3) + builder.entry_bytes() + bytes([ConstantPoolTag.CLASS]) + u2(int_idx)))
        with pytest.raises(ConstantTypeError):
            pool.class_name(2)

    def test_member_refs(self, builder):
        method = builder.add_methodref("java/io/PrintStream", "println", "(Ljava/lang/String;)V")
        fld = builder.add_fieldref("java/lang/System", "out", "Ljava/io/PrintStream;")
        iface = builder.add_interface_methodref("java/lang/Runnable", "run", "()V")
        pool = builder.to_pool()
        assert isinstance(pool.get_member_ref(method), ConstantMethodref)
        assert isinstance(pool.get_member_ref(fld), ConstantFieldref)
        assert pool.member_ref(method) == ("java/io/PrintStream", "println", "(Ljava/lang/String;)V")
        assert pool.member_ref(fld) == ("java/lang/System", "out", "Ljava/io/PrintStream;")
        assert pool.member_ref(iface) == ("java/lang/Runnable", "run", "()V")

    def test_member_ref_rejects_other_kinds(self, builder):
        idx = builder.add_class("A")
        pool = builder.to_pool()
        with pytest.raises(ConstantTypeError):
            pool.get_member_ref(idx)

    def test_class_name_or_none(self, builder):
        idx = builder.add_class("A")
        pool = builder.to_pool()
        assert pool.class_name_or_none(0) is None
        assert pool.class_name_or_none(idx) == "A"

    def test_string_and_constant_values(self, builder):
        s = builder.add_string("hello")
        i = builder.add_integer(10)
        d = builder.add_double(1.25)
        c = builder.add_class("A")
        pool = builder.to_pool()
        assert pool.string_value(s) == "hello"
        assert pool.constant_value(s) == "hello"
        assert pool.constant_value(i) == 10
        assert pool.constant_value(d) == 1.25
        with pytest.raises(ConstantTypeError):
            pool.constant_value(c)

    def test_iteration_skips_reserved(self, builder):
        builder.add_long(7)
        builder.add_utf8("x")
        pool = builder.to_pool()
        assert [index for index, _ in pool] == [1, 3]

    def test_no_resolution_during_build(self):
        # Forward and dangling references are only checked on lookup
        data = u2(3) + bytes([ConstantPoolTag.CLASS]) + u2(2) + bytes([ConstantPoolTag.STRING]) + u2(50)
        pool = ConstantPool.read(ByteReader(data))
        assert pool.get(1) == ConstantClass(2)
        with pytest.raises(ConstantTypeError):
            pool.class_name(1)
        with pytest.raises(ConstantIndexError):
            pool.string_value(2)


class TestDescribe:
    def test_class(self, builder):
        idx = builder.add_class("java/lang/String")
        pool = builder.to_pool()
        assert pool.get(idx).describe(pool) == "#1 // java/lang/String"

    def test_methodref(self, builder):
        idx = builder.add_methodref("java/lang/Object", "<init>", "()V")
        pool = builder.to_pool()
        entry = pool.get(idx)
        assert entry.describe(pool) == (
            f"#{entry.class_index}.#{entry.name_and_type_index} // java/lang/Object.<init>:()V")

    def test_scalars(self, builder):
        l = builder.add_long(3)
        d = builder.add_double(0.5)
        pool = builder.to_pool()
        assert pool.get(l).describe(pool) == "3l"
        assert pool.get(d).describe(pool) == "0.5d"
