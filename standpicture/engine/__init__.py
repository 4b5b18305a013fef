"""
立绘选择引擎

- RuleEvaluator: 单条规则的条件判定
- SliceSelector: 后声明优先的文件选择 + 动态文件名回退
- PortraitResolver: 按角色/场景/队伍位置解析所有图层
"""

from .predicates import Predicate, PredicateRegistry
from .conditions import RuleEvaluator
from .template import DynamicFileNameTemplate, expand_dynamic_file_name, hp_bucket_index, parse_hp_thresholds
from .selector import SliceSelector
from .registry import PictureRegistry
from .resolver import PortraitResolver, compute_scale
