from abc import ABCMeta
import inspect
from typing import Any, ClassVar, dataclass_transform, get_origin

from ..fields.schema_config import SchemaConfig, _SchemaConfig
from ..fields.field_schema import FieldSchema
from ..registration.get_type_expectation_from_type_annotation import get_type_expectation_from_type_annotation
from .validate_bsonable_dataclass_field_schema import validate_bsonable_dataclass_field_schema
from ...utilities.setup_error import SetupError
from ...utilities.validation_error import ValidationError
from ...utilities.undefined import UNDEFINED


__bsonable_fields__ = "__bsonable_fields__"
__frozen__ = "__frozen__"
__initialized__ = "__initialized__"


@dataclass_transform(field_specifiers=(SchemaConfig, ), kw_only_default=False)
class BsonableDataclassMeta(ABCMeta):
	"""Metaclass for BsonableDataclass that handles field registration and validation.

	Example usage:
		class Person(Document):
			name: str
			likes: int = 0
			tags: list[str] = SchemaConfig(default_factory=list)

	The metaclass will:
	1. Create FieldSchema instances for each annotated field (names starting with an underscore and ClassVars are skipped)
	2. Store the FieldSchema within both the class field and the class's __bsonable_fields__ dictionary, in declaration order
	3. Carry the fields of parent classes over, re-bound to this class
	4. Generate an __init__ which applies defaults and validates every value
	5. Manage frozen state. The frozen flag is inherited unless the class passes frozen= explicitly.
	"""

	def __new__(cls, name, bases, dct, *, frozen: bool | None = None):
		# Create the new class
		new_cls = super().__new__(cls, name, bases, dct)

		# Initialize the __bsonable_fields__ dictionary
		bsonable_fields: dict[str, FieldSchema] = {}

		# Collect fields from base classes, pointing their containing_cls at this subclass
		for base in bases:
			for field_name, base_field_schema in getattr(base, __bsonable_fields__, {}).items():
				bsonable_fields[field_name] = FieldSchema(
					field_name=field_name,
					containing_cls=new_cls, #type: ignore
					type_expectation=base_field_schema.type_expectation,
					schema_config=base_field_schema.schema_config
				)

		try:
			annotations_dict = inspect.get_annotations(new_cls, eval_str=True)
		except NameError as e:
			raise SetupError(f"Unable to resolve the annotations of class '{name}': {e}")

		for field_name, field_annotation in annotations_dict.items():
			# Skip private and bookkeeping names. _id is handled by Document itself.
			if field_name.startswith("_"):
				continue

			# Skip class variables
			if get_origin(field_annotation) is ClassVar:
				continue

			type_expectation = get_type_expectation_from_type_annotation(field_annotation)
			validate_bsonable_dataclass_field_schema(name, field_name, type_expectation)

			# Determine the field configuration
			cls_field_value = dct.get(field_name, UNDEFINED)
			if isinstance(cls_field_value, _SchemaConfig):
				field_config = cls_field_value
			elif cls_field_value is UNDEFINED:
				field_config = SchemaConfig()
			else:
				# A plain value is a default value
				field_config = SchemaConfig(default=cls_field_value)

			# Validate that any default values conform to the type annotation
			if field_config.default_value is not UNDEFINED:
				if not type_expectation._is_valid_value(field_config.default_value):
					raise SetupError(f"Field '{field_name}' has an improperly set default value. Expected type '{type_expectation}' but specified default value of {field_config.default_value!r}.")

			bsonable_fields[field_name] = FieldSchema(
				field_name=field_name,
				containing_cls=new_cls, #type: ignore
				type_expectation=type_expectation,
				schema_config=field_config
			)

		# Store the FieldSchema into both cls.__bsonable_fields__ as well as the cls field itself
		for field_name, field_schema in bsonable_fields.items():
			setattr(new_cls, field_name, field_schema)
		setattr(new_cls, __bsonable_fields__, bsonable_fields)

		# Set the frozen attribute based on the kwarg passed into the class, falling back to the parent's
		setattr(new_cls, __frozen__, frozen if frozen is not None else getattr(new_cls, __frozen__, False))

		def __init__(self, *args, **kwargs):
			# Separate out kwonly fields
			positional_or_kw_fields: dict[str, FieldSchema] = {}
			kw_only_fields: dict[str, FieldSchema] = {}
			for field_name, field_schema in type(self).__bsonable_fields__.items():
				if field_schema.schema_config.kw_only:
					kw_only_fields[field_name] = field_schema
				else:
					positional_or_kw_fields[field_name] = field_schema

			# Track positional args by storing them into a dict
			args_dict: dict[int, Any] = dict(enumerate(args))

			# Attempt to assign a value using either a positional arg, a kwarg, or a default value
			for idx, (field_name, field_schema) in enumerate(positional_or_kw_fields.items()):
				if idx in args_dict:
					field_value = args_dict.pop(idx)
				elif field_name in kwargs:
					field_value = kwargs.pop(field_name)
				elif field_schema.schema_config.has_default():
					field_value = field_schema.schema_config.get_default()
				else:
					raise ValidationError(f"Error creating instance of '{type(self).__name__}'. Field '{field_name}' was not supplied.")

				field_schema.validate_field_value(field_value)
				setattr(self, field_name, field_value)

			# If we have leftover args, raise an error
			if len(args_dict):
				extra_args_str = ", ".join(f"Idx {idx}: Value '{value}'" for idx, value in args_dict.items())
				raise ValidationError(f"Error creating instance of '{type(self).__name__}'. Too many positional arguments were supplied. {extra_args_str}")

			for field_name, field_schema in kw_only_fields.items():
				if field_name in kwargs:
					field_value = kwargs.pop(field_name)
				elif field_schema.schema_config.has_default():
					field_value = field_schema.schema_config.get_default()
				else:
					raise ValidationError(f"Error creating instance of '{type(self).__name__}'. Required keyword-only field '{field_name}' was not supplied.")

				field_schema.validate_field_value(field_value)
				setattr(self, field_name, field_value)

			# Store extra kwargs into the obj
			for extra_field_name, extra_field_value in kwargs.items():
				if extra_field_name.startswith("__"):
					raise ValidationError(f"Error creating instance of '{type(self).__name__}'. '{extra_field_name}' is a reserved name.")
				setattr(self, extra_field_name, extra_field_value)

			# Mark the instance as initialized (this is used to enforce the 'frozen' keyword.)
			setattr(self, __initialized__, True)

			self.__post_init__()

		def __setattr__(self, field_name, field_value):
			if getattr(self, __initialized__, False) and getattr(type(self), __frozen__, False):
				raise AttributeError(f"Failed to update field '{field_name}' to value {field_value!r}. Frozen dataclass of type '{type(self).__name__}' cannot be modified.")
			super(new_cls, self).__setattr__(field_name, field_value)

		new_cls.__init__ = __init__
		new_cls.__setattr__ = __setattr__ #type: ignore

		return new_cls
