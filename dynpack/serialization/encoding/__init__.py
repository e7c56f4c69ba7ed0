# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
This module was made to hold simple encoding implementations.

Simple in this context means "not compound". A number encoding can have a sign flag and two formats, but it does not
have a generic function or type as a parameter. For compound types (arrays, tables, the value dispatcher) the encoder
should be in the `compound_encoding` module.

Every encoded unit starts with a tag byte (see the `tag` submodule), whose top 3 bits select the kind and the low 5
bits carry a kind specific payload. Encoders write their own tag and decoders read and check their own tag, so the
general organization is that each submodule `x` deals with a single kind and looks like this:

    def encode_x(serializer: Serializer, value: ValueType, ...config params...) -> None:
        ...

    def decode_x(deserializer: Deserializer, ...config params...) -> ValueType:
        ...

The "config params" are optional and specific to each encoder. Submodules should not have to take into consideration
how values are mapped to encoders.
"""
